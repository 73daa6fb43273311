"""Tests for Dockerfile and worker source parsing."""

import pytest

from cloudship.parsing import defines_class, exported_classes, exposed_port, insert_class


class TestExposedPort:
    """Test EXPOSE directive parsing."""

    def test_first_expose_wins(self):
        assert exposed_port("FROM node\nEXPOSE 9000\nEXPOSE 3000\n") == 9000

    def test_default_when_missing(self):
        assert exposed_port("FROM nginx\n") == 8080
        assert exposed_port("FROM nginx\n", default=80) == 80

    @pytest.mark.parametrize(
        "line,port",
        [
            ("expose 3000", 3000),
            ("  EXPOSE   5000/tcp", 5000),
            ("EXPOSE 8000 8001", 8000),
        ],
    )
    def test_variants(self, line, port):
        assert exposed_port(f"FROM node\n{line}\n") == port

    def test_unparsable_token_is_skipped(self):
        assert exposed_port("EXPOSE $PORT\nEXPOSE 7000\n") == 7000

    def test_bare_expose_is_skipped(self):
        assert exposed_port("EXPOSE\n", default=1234) == 1234


class TestWorkerSource:
    """Test worker source class inspection and insertion."""

    def test_exported_classes(self):
        code = "export class A extends Container {}\nclass Hidden {}\nexport  class B {}\n"
        assert exported_classes(code) == ["A", "B"]

    def test_defines_class_is_exact(self):
        code = "export class NginxContainer1 extends Container {}"
        assert not defines_class(code, "NginxContainer")
        assert defines_class(code, "NginxContainer1")

    def test_insert_after_imports(self):
        code = 'import { Hono } from "hono";\n\nconst app = new Hono();\nexport default app;\n'

        result = insert_class(code, "export class New {}\n")

        assert result == (
            'import { Hono } from "hono";\n'
            "\n"
            "export class New {}\n"
            "\n"
            "const app = new Hono();\n"
            "export default app;\n"
        )

    def test_insert_without_blank_after_imports(self):
        code = 'import { Hono } from "hono";\nconst app = new Hono();\n'

        result = insert_class(code, "export class New {}")

        assert result == 'import { Hono } from "hono";\n\nexport class New {}\n\nconst app = new Hono();\n'

    def test_insert_at_top_without_imports(self):
        result = insert_class("const x = 1;\n", "export class New {}")
        assert result == "export class New {}\n\nconst x = 1;\n"

    def test_existing_classes_kept(self):
        code = 'import { Container } from "@cloudflare/containers";\n\nexport class Old extends Container {}\n'

        result = insert_class(code, "export class New extends Container {}")

        assert exported_classes(result) == ["New", "Old"]
