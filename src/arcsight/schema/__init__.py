"""Schema adapter: forward migrations for envelopes and configs."""

from .adapter import CONFIG, ENVELOPE, ENVELOPE_SCHEMA_VERSION, STEPS, adapt, upgrade_envelope

__all__ = ["CONFIG", "ENVELOPE", "ENVELOPE_SCHEMA_VERSION", "STEPS", "adapt", "upgrade_envelope"]
