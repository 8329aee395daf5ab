"""Tests for scanning/imports.py - import extraction from parse trees."""

from arcsight.scanning import PYTHON, TSX, TYPESCRIPT, TreeSitterParser, language_for, scan_file
from arcsight.snapshot import SourceFile


def _scan(path, text):
    return scan_file(SourceFile(path=path, content=text.encode("utf-8"), is_text=True))


def _specs(result):
    return [(d.specifier, d.line, d.is_type_only) for d in result.imports]


# ── Language detection ────────────────────────────────────────────


class TestLanguageFor:
    def test_typescript_and_python(self):
        assert language_for("src/a.ts") == TYPESCRIPT
        assert language_for("src/a.tsx") == TSX
        assert language_for("pkg/mod.py") == PYTHON

    def test_declaration_files_skipped(self):
        assert language_for("types/index.d.ts") is None

    def test_unknown_and_dotfiles(self):
        assert language_for("README.md") is None
        assert language_for(".eslintrc") is None


# ── TypeScript / JavaScript ──────────────────────────────────────


class TestScriptImports:
    def test_named_default_namespace_and_bare(self):
        text = (
            "import a from './a';\n"
            "import { b, c } from \"./b\";\n"
            "import * as d from './d';\n"
            "import './side-effect';\n"
        )
        result = _scan("src/x.ts", text)
        assert result.segmented
        assert _specs(result) == [
            ("./a", 1, False),
            ("./b", 2, False),
            ("./d", 3, False),
            ("./side-effect", 4, False),
        ]

    def test_multiline_clause_reports_keyword_line(self):
        text = "const x = 1;\nimport {\n  a,\n  b,\n} from './m';\n"
        assert _specs(_scan("src/x.ts", text)) == [("./m", 2, False)]

    def test_reexports(self):
        text = "export * from './all';\nexport { y } from './y';\n"
        assert _specs(_scan("src/x.ts", text)) == [("./all", 1, False), ("./y", 2, False)]

    def test_type_only_imports(self):
        text = (
            "import type { T } from './t';\n"
            "import { type A, type B } from './ab';\n"
            "import { type C, d } from './cd';\n"
            "export type { E } from './e';\n"
        )
        assert _specs(_scan("src/x.ts", text)) == [
            ("./t", 1, True),
            ("./ab", 2, True),
            ("./cd", 3, False),
            ("./e", 4, True),
        ]

    def test_require_forms(self):
        text = "const a = require('./a');\nimport b = require('./b');\n"
        assert _specs(_scan("src/x.ts", text)) == [("./a", 1, False), ("./b", 2, False)]

    def test_dynamic_import_is_not_an_edge(self):
        text = "export async function load() {\n  return import('./lazy');\n}\n"
        result = _scan("src/x.ts", text)
        assert result.segmented
        assert result.imports == ()

    def test_commented_imports_ignored(self):
        text = (
            "// import { a } from './a';\n"
            "/*\nimport { b } from './b';\n*/\n"
            "import { c } from './c';\n"
        )
        assert _specs(_scan("src/x.ts", text)) == [("./c", 5, False)]

    def test_comment_marker_inside_string(self):
        text = "const s = 'not // a comment';\nimport { c } from './c';\n"
        assert _specs(_scan("src/x.ts", text)) == [("./c", 2, False)]

    def test_require_inside_string_literal_ignored(self):
        text = "import { b } from './b';\nexport const hint = \"call require('./a') lazily\";\n"
        assert _specs(_scan("src/x.ts", text)) == [("./b", 1, False)]

    def test_import_inside_template_literal_ignored(self):
        text = (
            "export const snippet = `\n"
            "import { a } from './a';\n"
            "const c = require('./c');\n"
            "`;\n"
        )
        result = _scan("src/x.ts", text)
        assert result.segmented
        assert result.imports == ()

    def test_require_inside_function_body(self):
        text = "function load() {\n  return require('./lazy');\n}\n"
        assert _specs(_scan("src/x.js", text)) == [("./lazy", 2, False)]

    def test_tsx_and_jsx_parse(self):
        text = "import { Button } from './button';\nexport const App = () => <Button />;\n"
        assert _specs(_scan("src/app.tsx", text)) == [("./button", 1, False)]
        assert _specs(_scan("src/app.jsx", text)) == [("./button", 1, False)]

    def test_shared_parser(self):
        parser = TreeSitterParser()
        source = SourceFile(path="src/x.ts", content=b"import './a';\n", is_text=True)
        assert scan_file(source, parser) == scan_file(source)

    def test_unterminated_block_comment_fails_segmentation(self):
        result = _scan("src/x.ts", "import { a } from './a';\n/* never closed\n")
        assert not result.segmented
        assert result.imports == ()

    def test_unreadable_import_fails_segmentation(self):
        result = _scan("src/x.ts", "import { a } frm './a';\n")
        assert not result.segmented

    def test_binary_source_not_segmented(self):
        result = scan_file(SourceFile(path="src/x.ts", content=b"\x00\x01", is_text=False))
        assert result is not None
        assert not result.segmented

    def test_non_source_file_returns_none(self):
        assert _scan("styles/site.css", "@import 'x';\n") is None


# ── Python ───────────────────────────────────────────────────────


class TestPythonImports:
    def test_plain_and_aliased_imports(self):
        result = _scan("pkg/a.py", "import os\nimport pkg.b as b, pkg.c\n")
        assert _specs(result) == [("os", 1, False), ("pkg.b", 2, False), ("pkg.c", 2, False)]

    def test_from_imports_carry_names(self):
        result = _scan("pkg/a.py", "from . import b, c as see\nfrom ..core import models\n")
        first, second = result.imports
        assert (first.specifier, first.names) == (".", ("b", "c"))
        assert (second.specifier, second.names) == ("..core", ("models",))

    def test_parenthesized_from_import(self):
        text = "from .models import (\n    Alpha,\n    Beta,\n)\nx = 1\n"
        result = _scan("pkg/a.py", text)
        assert [(d.specifier, d.line, d.names) for d in result.imports] == [
            (".models", 1, ("Alpha", "Beta"))
        ]

    def test_type_checking_block_is_type_only(self):
        text = (
            "from typing import TYPE_CHECKING\n"
            "if TYPE_CHECKING:\n"
            "    from .b import B\n"
            "from .c import C\n"
        )
        assert _specs(_scan("pkg/a.py", text)) == [
            ("typing", 1, False),
            (".b", 3, True),
            (".c", 4, False),
        ]

    def test_function_level_imports_skipped(self):
        text = "def load():\n    from .b import B\n    return B\n\nfrom .c import C\n"
        assert _specs(_scan("pkg/a.py", text)) == [(".c", 5, False)]

    def test_docstrings_and_comments_ignored(self):
        text = '"""Module.\n\nimport os\n"""\n# import sys\nimport json\n'
        assert _specs(_scan("pkg/a.py", text)) == [("json", 6, False)]

    def test_class_body_and_try_imports_count(self):
        text = "try:\n    import fast\nexcept ImportError:\n    fast = None\n\nclass A:\n    from .b import B\n"
        assert _specs(_scan("pkg/a.py", text)) == [("fast", 2, False), (".b", 7, False)]

    def test_string_literal_import_ignored(self):
        text = "SNIPPET = 'from .b import B'\nimport json\n"
        assert _specs(_scan("pkg/a.py", text)) == [("json", 2, False)]

    def test_syntax_error_fails_segmentation(self):
        result = _scan("pkg/a.py", "from .b import B\ndef broken(:\n")
        assert not result.segmented
        assert result.imports == ()

    def test_unterminated_docstring_fails_segmentation(self):
        result = _scan("pkg/a.py", '"""never closed\nimport os\n')
        assert not result.segmented
