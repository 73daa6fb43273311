"""Templates for generated worker project files."""

from datetime import date
from typing import Any

from jinja2 import Template

CONTAINER_CLASS = Template("""\
export class {{ class_name }} extends Container<Env> {
  defaultPort = {{ port }};
  sleepAfter = "2m";

  override onStart() {
    console.log("{{ class_name }} successfully started on port {{ port }}");
  }

  override onStop() {
    console.log("{{ class_name }} successfully shut down");
  }

  override onError(error: unknown) {
    console.log("{{ class_name }} error:", error);
  }
}
""")

WORKER = Template("""\
import { Container, getContainer } from "@cloudflare/containers";
import { Hono } from "hono";

{{ container_class }}

const app = new Hono<{
  Bindings: Env;
}>();

// Forward all requests to the container
app.all("*", async (c) => {
  const container = getContainer(c.env.{{ binding_name }});
  return await container.fetch(c.req.raw);
});

export default app;
""")

GENERATED_DOCKERFILE = Template("""\
FROM {{ image }}
EXPOSE {{ port }}
""")

IGNORE_FILE = """\
node_modules/
*.log
.env
.DS_Store
dist/
build/
coverage/
.nyc_output/
*.tgz
*.tar.gz
"""


def render_container_class(class_name: str, port: int) -> str:
    return CONTAINER_CLASS.render(class_name=class_name, port=port)


def render_worker(class_name: str, binding_name: str, port: int) -> str:
    """Complete src/index.ts proxying every request to one container class."""
    return WORKER.render(
        container_class=render_container_class(class_name, port),
        binding_name=binding_name,
    )


def render_generated_dockerfile(image: str, port: int) -> str:
    return GENERATED_DOCKERFILE.render(image=image, port=port)


def descriptor_document(project_name: str, compatibility_flag: str, main: str) -> dict[str, Any]:
    """Minimal descriptor for a project that has none yet.

    Resource, binding and migration lists start empty; the merge engine
    fills them like it would for an existing file.
    """
    return {
        "name": project_name,
        "main": main,
        "compatibility_date": date.today().isoformat(),
        "compatibility_flags": [compatibility_flag],
        "observability": {"enabled": True},
        "containers": [],
        "durable_objects": {"bindings": []},
        "migrations": [],
    }


def tsconfig() -> dict[str, Any]:
    return {
        "compilerOptions": {
            "target": "es2021",
            "lib": ["es2021"],
            "module": "es2022",
            "moduleResolution": "Bundler",
            "types": ["./worker-configuration.d.ts", "node"],
            "resolveJsonModule": True,
            "allowJs": True,
            "checkJs": False,
            "noEmit": True,
            "isolatedModules": True,
            "allowSyntheticDefaultImports": True,
            "forceConsistentCasingInFileNames": True,
            "strict": True,
            "skipLibCheck": True,
        },
        "exclude": ["test"],
        "include": ["worker-configuration.d.ts", "src/**/*.ts"],
    }


def package_manifest(project_name: str) -> dict[str, Any]:
    return {
        "name": project_name,
        "description": f"Cloudflare Worker with Container - {project_name}",
        "private": True,
        "scripts": {
            "deploy": "wrangler deploy",
            "dev": "wrangler dev",
            "start": "wrangler dev",
            "cf-typegen": "wrangler types",
        },
        "devDependencies": {
            "@types/node": "^24.3.0",
            "typescript": "5.8.3",
            "wrangler": "^4.33.1",
        },
        "dependencies": {
            "@cloudflare/containers": "^0.0.19",
            "hono": "4.8.2",
        },
    }
