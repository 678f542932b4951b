"""Built-in templates for the generated Flutter + Node monorepo.

Every template is rendered with :class:`rapid_dev.template.TemplateRenderer`
against :meth:`rapid_dev.config.ProjectSettings.context`.
"""

from __future__ import annotations

__all__ = ["MONOREPO_DIRECTORIES", "MONOREPO_FILES", "EXECUTABLE_FILES"]


NETLIFY_TOML = """[build]
  base = "apps/client"
  command = "flutter build web --release"
  publish = "build/web"

[build.environment]
  NODE_VERSION = "{{ node_version }}"

# SPA redirect so Flutter web routes don't 404
[[redirects]]
  from = "/*"
  to = "/index.html"
  status = 200
"""

GITIGNORE = """# --- Flutter/Dart ---
.dart_tool/
.packages
.pub/
.pub-cache/
build/
.flutter-plugins
.flutter-plugins-dependencies
*.iml
apps/client/build/

# --- Node ---
node_modules/
dist/
coverage/
npm-debug.log*
yarn-debug.log*
yarn-error.log*
pnpm-debug.log*

# --- Env ---
.env
.env.*
!.env.example

# --- IDE/Editor ---
.vscode/
.idea/
*.swp

# --- OS ---
.DS_Store
Thumbs.db

# --- Project local artifacts ---
artifacts/
tmp/
"""

README = """# {{ repo_name }}

Monorepo layout:

- `apps/client`: Flutter app (web + mobile)
- `functions/api`: Node functions (deploy to GCP)

## Local dev

### Flutter
```bash
cd apps/client
flutter pub get
flutter run
```

### Functions
```bash
cd functions/api
npm install
npm run dev:ts
```

## Deploy

- Web: Netlify builds from `apps/client` and publishes `apps/client/build/web`
- API: `node scripts/deploy-api.mjs --target functions|run --project <id>`

## Scripts

- `node scripts/smoke.mjs`: check the layout and that both apps build
- `node scripts/zip-flutter.mjs`: zip the Flutter sources into `artifacts/`
"""

ROOT_ENV_EXAMPLE = """# Shared defaults used by scripts/deploy-api.mjs (and functions/api/scripts/deploy.mjs)
GCP_PROJECT={{ gcp_project }}
GCP_REGION={{ gcp_region }}
GCP_SERVICE=api
GCP_ENTRY_POINT=handler
"""

DEPLOY_API_SCRIPT = """#!/usr/bin/env node
import { execSync } from "child_process";
import path from "path";

function run(cmd, cwd) {
  console.log("\\n> " + cmd);
  execSync(cmd, { stdio: "inherit", cwd });
}

const args = process.argv.slice(2).join(" ");
const apiDir = path.resolve("functions/api");

run(`node scripts/deploy.mjs ${args}`, apiDir);
"""

SMOKE_SCRIPT = """#!/usr/bin/env node
import fs from "fs";
import { execSync } from "child_process";

function ok(cond, msg) {
  if (!cond) {
    console.error("FAIL:", msg);
    process.exit(1);
  }
  console.log("OK:", msg);
}

function builds(cmd, cwd) {
  try {
    execSync(cmd, { cwd, stdio: "ignore" });
    return true;
  } catch {
    return false;
  }
}

ok(fs.existsSync("apps/client/pubspec.yaml"), "Flutter app exists at apps/client");
ok(fs.existsSync("functions/api/package.json"), "API exists at functions/api");
ok(fs.existsSync("netlify.toml"), "netlify.toml exists");
ok(fs.existsSync(".gitignore"), ".gitignore exists");
ok(fs.existsSync("apps/client/.dart_tool"), "Flutter dependencies installed");
ok(fs.existsSync("functions/api/node_modules"), "API dependencies installed");
ok(builds("flutter build web --release", "apps/client"), "Flutter app builds");
ok(builds("npm run build", "functions/api"), "API builds");

console.log("\\nSmoke checks passed.");
"""

ZIP_FLUTTER_SCRIPT = """#!/usr/bin/env node
import { execSync } from "child_process";
import fs from "fs";
import os from "os";
import path from "path";

function run(cmd) {
  console.log("\\n> " + cmd);
  execSync(cmd, { stdio: "inherit" });
}

const base = path.resolve("apps/client");
if (!fs.existsSync(base)) {
  console.error("apps/client not found.");
  process.exit(1);
}

const include = ["lib", "pubspec.yaml", "pubspec.lock", "analysis_options.yaml", "web", "assets"].filter((p) =>
  fs.existsSync(path.join(base, p))
);
if (include.length === 0) {
  console.error("Nothing found to zip.");
  process.exit(1);
}

const outDir = path.resolve("artifacts");
fs.mkdirSync(outDir, { recursive: true });
const stamp = new Date().toISOString().replace(/[:.]/g, "-");
const zipPath = path.join(outDir, `flutter-source-${stamp}.zip`);

if (os.platform() === "win32") {
  const tmp = path.join(outDir, `tmp-flutter-${stamp}`);
  for (const rel of include) {
    fs.cpSync(path.join(base, rel), path.join(tmp, rel), { recursive: true });
  }
  const source = path.join(tmp, "*");
  run(`powershell -NoProfile -Command "Compress-Archive -Path '${source}' -DestinationPath '${zipPath}' -Force"`);
  fs.rmSync(tmp, { recursive: true, force: true });
} else {
  try {
    execSync("zip -v", { stdio: "ignore" });
  } catch {
    console.error("zip command not found. Install zip or run on Windows.");
    process.exit(1);
  }
  const args = include.map((p) => `"${p}"`).join(" ");
  run(`cd "${base}" && zip -r "${zipPath}" ${args} -x "build/*" ".dart_tool/*"`);
}

console.log("\\nCreated:", zipPath);
"""

API_PACKAGE_JSON = """{
  "name": {{ api_package|json }},
  "private": true,
  "version": "0.0.0",
  "type": "module",
  "main": "dist/index.js",
  "scripts": {
    "dev:ts": "tsx watch src/index.ts",
    "build": "tsc -p tsconfig.json",
    "start": "node dist/index.js",
    "lint": "eslint .",
    "format": "prettier -w .",
    "deploy:functions": "node scripts/deploy.mjs --target functions",
    "deploy:run": "node scripts/deploy.mjs --target run"
  },
  "dependencies": {
    "@google-cloud/functions-framework": "^3.5.0",
    "dotenv": "^16.4.5"
  },
  "devDependencies": {
    "@eslint/js": "^9.10.0",
    "@types/node": "^22.5.5",
    "eslint": "^9.10.0",
    "globals": "^15.9.0",
    "prettier": "^3.3.3",
    "tsx": "^4.19.0",
    "typescript": "^5.6.3"
  }
}
"""

API_TSCONFIG = """{
  "compilerOptions": {
    "target": "ES2022",
    "lib": ["ES2022"],
    "module": "ES2022",
    "moduleResolution": "Bundler",
    "outDir": "dist",
    "rootDir": "src",
    "strict": true,
    "esModuleInterop": true,
    "skipLibCheck": true,
    "sourceMap": true,
    "types": ["node"]
  },
  "include": ["src/**/*.ts"]
}
"""

API_ESLINT_CONFIG = """import js from "@eslint/js";
import globals from "globals";

export default [
  js.configs.recommended,
  {
    files: ["**/*.ts", "**/*.js"],
    languageOptions: {
      globals: { ...globals.node },
    },
    rules: {
      "no-unused-vars": "off",
    },
  },
];
"""

API_PRETTIER = """{
  "singleQuote": true,
  "semi": true,
  "printWidth": 100
}
"""

API_INDEX_TS = """import "dotenv/config";
import { HttpFunction } from "@google-cloud/functions-framework";

export const handler: HttpFunction = (req, res) => {
  res.setHeader("content-type", "application/json");
  res.status(200).send(JSON.stringify({ ok: true, path: req.url }));
};
"""

API_DEPLOY_SCRIPT = """#!/usr/bin/env node
import { execSync } from "child_process";

function getArg(key, def) {
  const ix = process.argv.indexOf("--" + key);
  if (ix === -1) return def;
  const v = process.argv[ix + 1];
  if (!v || v.startsWith("--")) return def;
  return v;
}

const target = getArg("target", "functions");
const service = getArg("service", process.env.GCP_SERVICE || "api");
const region = getArg("region", process.env.GCP_REGION || "{{ gcp_region }}");
const project = getArg("project", process.env.GCP_PROJECT || "");
const entry = getArg("entry", process.env.GCP_ENTRY_POINT || "handler");
const dryRun = process.argv.includes("--dry-run");

function run(cmd) {
  console.log("\\n> " + cmd);
  if (dryRun) return;
  execSync(cmd, { stdio: "inherit" });
}

if (!project) {
  console.log("\\nMissing project. Set GCP_PROJECT env var or pass --project <id>.");
  process.exit(1);
}

run(`gcloud config set project ${project}`);

if (target === "functions") {
  run(
    [
      `gcloud functions deploy ${service}`,
      "--gen2",
      `--region=${region}`,
      "--runtime=nodejs20",
      "--source=.",
      `--entry-point=${entry}`,
      "--trigger-http",
      "--allow-unauthenticated",
    ].join(" ")
  );
} else if (target === "run") {
  run(
    [
      `gcloud run deploy ${service}`,
      `--region=${region}`,
      "--source=.",
      "--allow-unauthenticated",
    ].join(" ")
  );
} else {
  console.log(`Unknown --target "${target}" (use "functions" or "run")`);
  process.exit(1);
}
"""

API_ENV_EXAMPLE = "NODE_ENV=development\n"


MONOREPO_DIRECTORIES: tuple[str, ...] = ("apps", "functions", "scripts", "artifacts")

MONOREPO_FILES: tuple[tuple[str, str], ...] = (
    ("netlify.toml", NETLIFY_TOML),
    (".gitignore", GITIGNORE),
    ("README.md", README),
    (".env.example", ROOT_ENV_EXAMPLE),
    ("scripts/deploy-api.mjs", DEPLOY_API_SCRIPT),
    ("scripts/smoke.mjs", SMOKE_SCRIPT),
    ("scripts/zip-flutter.mjs", ZIP_FLUTTER_SCRIPT),
    ("functions/api/package.json", API_PACKAGE_JSON),
    ("functions/api/tsconfig.json", API_TSCONFIG),
    ("functions/api/eslint.config.js", API_ESLINT_CONFIG),
    ("functions/api/.prettierrc", API_PRETTIER),
    ("functions/api/src/index.ts", API_INDEX_TS),
    ("functions/api/scripts/deploy.mjs", API_DEPLOY_SCRIPT),
    ("functions/api/.env.example", API_ENV_EXAMPLE),
)

EXECUTABLE_FILES: frozenset[str] = frozenset(
    path for path, _ in MONOREPO_FILES if path.endswith(".mjs")
)
