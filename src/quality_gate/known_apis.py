"""Reference tables for the import and API-reference checks.

The tables are deliberately conservative: an import or member that is
missing here is reported as a *warning*, never a failure.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Package allowlists
# ---------------------------------------------------------------------------

NODE_BUILTIN_MODULES: frozenset[str] = frozenset(
    {
        "assert", "buffer", "child_process", "cluster", "crypto", "dns",
        "events", "fs", "http", "http2", "https", "module", "net", "os",
        "path", "perf_hooks", "process", "querystring", "readline",
        "stream", "string_decoder", "timers", "tls", "url", "util", "v8",
        "vm", "worker_threads", "zlib", "test",
    }
)

KNOWN_NPM_PACKAGES: frozenset[str] = frozenset(
    {
        "react", "react-dom", "next", "vue", "svelte", "express", "fastify",
        "koa", "hono", "axios", "node-fetch", "lodash", "zod", "joi", "yup",
        "prisma", "@prisma/client", "typescript", "jest", "vitest", "mocha",
        "chai", "supertest", "dotenv", "cors", "helmet", "compression",
        "cookie-parser", "body-parser", "morgan", "multer", "jsonwebtoken",
        "bcrypt", "bcryptjs", "uuid", "dayjs", "moment", "date-fns", "redis",
        "ioredis", "pg", "mysql2", "mongoose", "mongodb", "sequelize",
        "typeorm", "knex", "socket.io", "socket.io-client", "ws", "winston",
        "pino", "openai", "@anthropic-ai/sdk", "stripe", "zustand", "redux",
        "@reduxjs/toolkit", "react-redux", "react-router", "react-router-dom",
        "tailwindcss", "classnames", "clsx", "@tanstack/react-query", "swr",
        "graphql", "@apollo/client", "@apollo/server", "nodemailer",
        "passport", "sharp", "commander", "yargs", "chalk", "inquirer", "rxjs",
        "immer", "framer-motion", "react-hook-form", "@testing-library/react",
        "@testing-library/jest-dom", "eslint", "prettier", "webpack", "vite",
        "esbuild", "@nestjs/common", "@nestjs/core", "aws-sdk",
        "@aws-sdk/client-s3", "cheerio", "puppeteer", "playwright",
        "@playwright/test", "lucide-react", "recharts", "d3", "three",
        "express-rate-limit", "express-validator", "class-validator",
        "class-transformer", "reflect-metadata", "bull", "bullmq", "node-cron",
        "marked", "diff", "@vitejs/plugin-react",
    }
)

KNOWN_PYTHON_PACKAGES: frozenset[str] = frozenset(
    {
        "requests", "httpx", "aiohttp", "fastapi", "starlette", "pydantic",
        "pydantic_settings", "flask", "django", "sqlalchemy", "alembic",
        "numpy", "pandas", "polars", "pyarrow", "scipy", "sklearn",
        "matplotlib", "seaborn", "pytest", "yaml", "click", "typer", "rich",
        "jinja2", "uvicorn", "gunicorn", "celery", "redis", "boto3",
        "botocore", "psycopg2", "psycopg", "pymysql", "pymongo", "motor",
        "openai", "anthropic", "transformers", "torch", "tensorflow", "keras",
        "PIL", "bs4", "lxml", "dateutil", "pytz", "jwt", "cryptography",
        "bcrypt", "passlib", "dotenv", "attr", "attrs", "marshmallow", "tqdm",
        "loguru", "structlog", "networkx", "transitions", "tenacity", "orjson",
        "ujson", "toml", "tomli", "websockets", "grpc", "sentry_sdk",
        "prometheus_client", "hypothesis", "freezegun", "faker", "respx",
        "aiofiles", "anyio", "trio", "sympy", "tiktoken", "chromadb",
    }
)

# Distribution names whose import name differs.
PYTHON_DISTRIBUTION_ALIASES: dict[str, str] = {
    "pyyaml": "yaml",
    "beautifulsoup4": "bs4",
    "scikit-learn": "sklearn",
    "pillow": "PIL",
    "python-dotenv": "dotenv",
    "pyjwt": "jwt",
    "python-dateutil": "dateutil",
    "psycopg2-binary": "psycopg2",
    "pydantic-settings": "pydantic_settings",
    "sentry-sdk": "sentry_sdk",
    "prometheus-client": "prometheus_client",
}

# ---------------------------------------------------------------------------
# Framework member tables
# ---------------------------------------------------------------------------

PYTHON_MODULE_MEMBERS: dict[str, frozenset[str]] = {
    "json": frozenset(
        {"load", "loads", "dump", "dumps", "JSONDecoder", "JSONEncoder", "JSONDecodeError"}
    ),
    "os": frozenset(
        {
            "getenv", "putenv", "unsetenv", "listdir", "makedirs", "mkdir",
            "remove", "unlink", "rename", "replace", "rmdir", "removedirs",
            "walk", "getcwd", "chdir", "stat", "lstat", "scandir", "system",
            "popen", "kill", "killpg", "getpid", "getppid", "getuid", "urandom",
            "fspath", "cpu_count", "access", "chmod", "chown", "symlink",
            "readlink", "link", "utime", "get_terminal_size", "truncate",
            "umask", "isatty", "open", "close", "read", "write", "pipe", "dup",
            "dup2", "fork", "execv", "execvp", "execvpe", "_exit", "abort",
            "times", "uname", "waitpid", "setsid", "nice", "getlogin",
            "fsencode", "fsdecode", "get_exec_path", "sched_getaffinity",
        }
    ),
    "re": frozenset(
        {
            "compile", "search", "match", "fullmatch", "split", "findall",
            "finditer", "sub", "subn", "escape", "purge", "error",
        }
    ),
    "requests": frozenset(
        {"get", "post", "put", "patch", "delete", "head", "options", "request", "Session", "session", "Request"}
    ),
    "subprocess": frozenset(
        {
            "run", "Popen", "call", "check_call", "check_output", "getoutput",
            "getstatusoutput", "CompletedProcess", "TimeoutExpired",
            "CalledProcessError",
        }
    ),
    "time": frozenset(
        {
            "time", "sleep", "monotonic", "perf_counter", "process_time",
            "strftime", "strptime", "gmtime", "localtime", "mktime", "ctime",
            "asctime", "time_ns", "monotonic_ns", "perf_counter_ns",
            "process_time_ns", "thread_time", "get_clock_info",
        }
    ),
    "math": frozenset(
        {
            "sqrt", "pow", "floor", "ceil", "log", "log10", "log2", "exp",
            "exp2", "expm1", "log1p", "sin", "cos", "tan", "asin", "acos",
            "atan", "atan2", "sinh", "cosh", "tanh", "asinh", "acosh", "atanh",
            "hypot", "fabs", "factorial", "gcd", "lcm", "isclose", "isfinite",
            "isinf", "isnan", "isqrt", "trunc", "fsum", "prod", "sumprod",
            "comb", "perm", "degrees", "radians", "copysign", "fmod", "modf",
            "frexp", "ldexp", "dist", "erf", "erfc", "gamma", "lgamma",
            "remainder", "nextafter", "ulp", "cbrt",
        }
    ),
}

_JS_FS_MEMBERS: frozenset[str] = frozenset(
    {
        "readFile", "readFileSync", "writeFile", "writeFileSync", "appendFile",
        "appendFileSync", "exists", "existsSync", "mkdir", "mkdirSync",
        "mkdtemp", "mkdtempSync", "readdir", "readdirSync", "stat", "statSync",
        "lstat", "lstatSync", "fstat", "fstatSync", "unlink", "unlinkSync",
        "rename", "renameSync", "rm", "rmSync", "rmdir", "rmdirSync",
        "createReadStream", "createWriteStream", "watch", "watchFile",
        "unwatchFile", "copyFile", "copyFileSync", "cp", "cpSync", "access",
        "accessSync", "open", "openSync", "close", "closeSync", "read",
        "readSync", "write", "writeSync", "realpath", "realpathSync",
        "symlink", "symlinkSync", "readlink", "readlinkSync", "chmod",
        "chmodSync", "truncate", "truncateSync", "utimes", "utimesSync",
        "opendir", "opendirSync",
    }
)

JS_MODULE_MEMBERS: dict[str, frozenset[str]] = {
    "fs": _JS_FS_MEMBERS,
    "fs/promises": _JS_FS_MEMBERS,
    "path": frozenset(
        {
            "join", "resolve", "dirname", "basename", "extname", "normalize",
            "relative", "isAbsolute", "parse", "format", "toNamespacedPath",
        }
    ),
    "axios": frozenset(
        {
            "get", "post", "put", "patch", "delete", "head", "options",
            "request", "create", "all", "spread", "isAxiosError", "isCancel",
            "postForm", "putForm", "patchForm", "getUri",
        }
    ),
    "react": frozenset(
        {
            "useState", "useEffect", "useContext", "useReducer", "useCallback",
            "useMemo", "useRef", "useImperativeHandle", "useLayoutEffect",
            "useDebugValue", "useId", "useTransition", "useDeferredValue",
            "useSyncExternalStore", "useInsertionEffect", "useOptimistic",
            "useActionState", "use", "createElement", "cloneElement",
            "createContext", "createRef", "forwardRef", "memo", "lazy",
            "startTransition", "isValidElement", "cache",
        }
    ),
}

# Globals that are always in scope for JavaScript / TypeScript files.
JS_GLOBAL_MEMBERS: dict[str, frozenset[str]] = {
    "JSON": frozenset({"parse", "stringify"}),
    "Math": frozenset(
        {
            "abs", "ceil", "floor", "round", "max", "min", "pow", "sqrt",
            "random", "sign", "trunc", "log", "log10", "log2", "exp", "sin",
            "cos", "tan", "atan", "atan2", "asin", "acos", "hypot", "cbrt",
            "clz32", "fround", "imul", "expm1", "log1p", "sinh", "cosh",
            "tanh", "asinh", "acosh", "atanh",
        }
    ),
    "console": frozenset(
        {
            "log", "error", "warn", "info", "debug", "trace", "table", "time",
            "timeEnd", "timeLog", "group", "groupEnd", "groupCollapsed",
            "assert", "dir", "count", "countReset", "clear",
        }
    ),
    "Object": frozenset(
        {
            "keys", "values", "entries", "assign", "freeze", "create",
            "defineProperty", "defineProperties", "getPrototypeOf",
            "setPrototypeOf", "fromEntries", "getOwnPropertyNames",
            "getOwnPropertyDescriptor", "getOwnPropertyDescriptors",
            "getOwnPropertySymbols", "is", "isFrozen", "isSealed", "seal",
            "preventExtensions", "isExtensible", "hasOwn", "groupBy",
        }
    ),
    "Promise": frozenset(
        {"all", "allSettled", "any", "race", "resolve", "reject", "withResolvers"}
    ),
}
