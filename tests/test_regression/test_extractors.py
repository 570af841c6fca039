"""Tests for the regression source extractors."""
from __future__ import annotations

from src.regression.extractors import (
    count_destructive_statements,
    count_error_handling,
    count_validation,
    extract_exports,
    extract_prisma_fields,
    extract_signatures,
    extract_sql_columns,
)


class TestExtractExports:
    def test_javascript_declarations_and_lists(self):
        content = (
            "export function foo() {}\n"
            "export default class Widget {}\n"
            "export const LIMIT = 3;\n"
            "const a = 1, c = 2;\n"
            "export { a as b, c };\n"
        )
        assert extract_exports(content, "src/lib.ts") == ["foo", "Widget", "LIMIT", "b", "c"]

    def test_python_dunder_all_wins(self):
        content = "__all__ = ['load', \"save\"]\n\ndef load():\n    pass\n\ndef helper():\n    pass\n"
        assert extract_exports(content, "pkg/io.py") == ["load", "save"]

    def test_python_public_top_level_names(self):
        content = "def load():\n    pass\n\ndef _private():\n    pass\n\nclass Store:\n    def method(self):\n        pass\n"
        assert extract_exports(content, "pkg/io.py") == ["load", "Store"]

    def test_go_capitalised_names(self):
        content = "package api\n\nfunc Handle() {}\nfunc helper() {}\ntype Server struct{}\nfunc (s *Server) Start() {}\n"
        assert extract_exports(content, "api/server.go") == ["Handle", "Server", "Start"]


class TestExtractSignatures:
    def test_python_ignores_self(self):
        content = "class A:\n    def m(self, a, b=1, *args):\n        pass\n"
        assert extract_signatures(content, "a.py") == {"A.m": 3}

    def test_python_methods_are_qualified_by_class(self):
        content = (
            "def build(a):\n    pass\n\n"
            "class A:\n    def __init__(self):\n        pass\n\n"
            "class B:\n    def __init__(self, a, b):\n        pass\n\n"
            "    class Meta:\n        def check(self, x):\n            pass\n\n"
            "def after(a, b):\n    pass\n"
        )
        assert extract_signatures(content, "a.py") == {
            "build": 1,
            "A.__init__": 0,
            "B.__init__": 2,
            "B.Meta.check": 1,
            "after": 2,
        }

    def test_javascript_functions_and_arrows(self):
        content = "function add(a, b) { return a + b; }\nconst inc = (x) => x + 1;\n"
        assert extract_signatures(content, "a.js") == {"add": 2, "inc": 1}

    def test_generic_parameters_are_not_split(self):
        content = "function f<T>(a: Map<string, T>, b: number) {}\n"
        assert extract_signatures(content, "a.ts") == {"f": 2}


class TestSchemaExtraction:
    def test_prisma_fields(self):
        content = (
            "model User {\n"
            "  id     Int      @id @default(autoincrement())\n"
            "  email  String   @unique\n"
            "  name   String?\n"
            "  posts  Post[]\n"
            "  @@index([email])\n"
            "}\n"
        )
        assert extract_prisma_fields(content) == {
            "User.id": True,
            "User.email": False,
            "User.name": True,
            "User.posts": True,
        }

    def test_sql_columns(self):
        content = (
            "CREATE TABLE users (\n"
            "  id INTEGER PRIMARY KEY,\n"
            "  email TEXT NOT NULL,\n"
            "  name TEXT,\n"
            "  status TEXT NOT NULL DEFAULT 'active',\n"
            "  price NUMERIC(10, 2),\n"
            "  UNIQUE (email)\n"
            ");\n"
        )
        assert extract_sql_columns(content) == {
            "users.id": False,
            "users.email": False,
            "users.name": True,
            "users.status": True,
            "users.price": True,
        }

    def test_destructive_statements(self):
        content = "DROP TABLE sessions;\nDELETE FROM logs;\nDELETE FROM users WHERE id = 1;\n"
        counts = count_destructive_statements(content)

        assert counts["DROP TABLE"] == 1
        assert counts["DELETE FROM"] == 1
        assert counts["TRUNCATE"] == 0

    def test_multiline_delete_with_where_is_qualified(self):
        content = "DELETE FROM users\nWHERE id = 1;\nDELETE FROM audit\n;\n"
        assert count_destructive_statements(content)["DELETE FROM"] == 1


class TestBehavioralTokens:
    def test_error_handling_counts_each_construct_once(self):
        content = "try {\n  run();\n} catch (e) {\n  log(e);\n}\npromise.catch(handle);\n"
        assert count_error_handling(content) == 3

    def test_python_error_handling(self):
        content = "try:\n    run()\nexcept ValueError:\n    pass\nif err:\n    raise\n"
        assert count_error_handling(content) == 3

    def test_validation(self):
        content = "validateUser(u)\nassert isinstance(x, int)\nif (typeof x === 'string') {}\n"
        assert count_validation(content) == 4
