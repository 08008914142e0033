"""Built-in records written to a fresh config root."""

from agentpack.models import MCPServerDefinition, ProviderCatalog, Template

DEFAULT_PROVIDERS = {
    "providers": {
        "claude": {
            "name": "Anthropic Claude",
            "models": ["claude-sonnet-4-20250514", "claude-haiku-20250514"],
            "defaultModel": "claude-sonnet-4-20250514",
        },
        "openai": {
            "name": "OpenAI GPT",
            "models": ["gpt-4", "gpt-3.5-turbo"],
            "defaultModel": "gpt-4",
        },
    }
}


_TEMPLATES = [
    {
        "id": "code-analyst-template",
        "kind": "agent",
        "name": "Code Analyst Template",
        "description": "Agent template for code analysis and review",
        "category": "development",
        "tags": ["code-analysis", "review", "quality"],
        "defaults": {
            "name": "Code Analyst",
            "description": "Analyzes code quality and reviews changes",
            "role": "sub",
            "systemPrompt": (
                "You are a professional code analyst. Analyze code quality, find "
                "potential problems and suggest improvements. Pay close attention "
                "to structure, performance, security and maintainability."
            ),
            "llmProvider": "claude",
            "llmModel": "claude-sonnet-4-20250514",
            "enabledTools": ["Read", "Grep", "Glob"],
            "tags": ["code-analysis", "review", "quality"],
        },
    },
    {
        "id": "code-generator-template",
        "kind": "agent",
        "name": "Code Generator Template",
        "description": "Agent template that writes code from requirements",
        "category": "development",
        "tags": ["code-generation", "development", "automation"],
        "defaults": {
            "name": "Code Generator",
            "description": "Writes code from requirements",
            "role": "sub",
            "systemPrompt": (
                "You are a code generation expert. Write high quality code for the "
                "given requirements, following best practices, and keep it readable "
                "and maintainable."
            ),
            "llmProvider": "claude",
            "llmModel": "claude-sonnet-4-20250514",
            "enabledTools": ["Write", "Edit", "Read", "Glob"],
            "tags": ["code-generation", "development", "automation"],
        },
    },
    {
        "id": "project-manager-template",
        "kind": "agent",
        "name": "Project Manager Template",
        "description": "Main agent template that coordinates other agents",
        "category": "management",
        "tags": ["project-management", "coordination", "planning"],
        "defaults": {
            "name": "Project Manager",
            "description": "Plans the work and coordinates the other agents",
            "role": "main",
            "systemPrompt": (
                "You are a project manager coordinating a workflow. Make a sound "
                "execution plan, coordinate the sub tasks and make sure the project "
                "is completed."
            ),
            "llmProvider": "claude",
            "llmModel": "claude-sonnet-4-20250514",
            "enabledTools": ["Read", "Write", "Grep", "Glob"],
            "tags": ["project-management", "coordination", "planning"],
        },
    },
    {
        "id": "code-review-workflow",
        "kind": "workflow",
        "name": "Code Review Workflow",
        "description": "Parallel code analysis followed by a synthesized review report",
        "category": "development",
        "tags": ["code-review", "quality"],
        "defaults": {
            "name": "Code Review",
            "description": "Analyze a change set and produce a review report",
            "status": "draft",
            "steps": [],
            "tags": ["code-review", "quality"],
        },
    },
    {
        "id": "content-creation-workflow",
        "kind": "workflow",
        "name": "Content Creation Workflow",
        "description": "Research, write and edit a piece of content",
        "category": "content",
        "tags": ["content", "writing"],
        "defaults": {
            "name": "Content Creation",
            "description": "Research a topic, draft the content and edit it",
            "status": "draft",
            "steps": [],
            "tags": ["content", "writing"],
        },
    },
]


_MCP_SERVERS = [
    {
        "id": "code-quality",
        "name": "Code Quality MCP",
        "description": "Built-in MCP service for code quality analysis",
        "providers": ["claude"],
        "command": "node",
        "args": ["./mcp-servers/code-quality/index.js"],
        "env": {
            "ESLINT_CONFIG": "./eslint.config.js",
            "PRETTIER_CONFIG": "./.prettierrc",
        },
        "timeout": 300,
        "status": "active",
        "tags": ["analysis", "quality"],
        "supportedModels": ["claude-sonnet-4-20250514", "claude-haiku-20250514"],
        "tools": [{"name": "code_analyzer", "description": "Analyze code quality and structure"}],
    },
    {
        "id": "git-ops",
        "name": "Git Operations MCP",
        "description": "Common Git operations",
        "providers": ["claude"],
        "command": "node",
        "args": ["./mcp-servers/git-ops/index.js"],
        "env": {"GIT_USER_NAME": "Pack Agents", "GIT_USER_EMAIL": "agents@pack.dev"},
        "status": "active",
        "tags": ["git", "operations"],
        "tools": [{"name": "git_operations", "description": "Perform Git operations"}],
    },
    {
        "id": "database-tools",
        "name": "Database MCP",
        "description": "Tools for querying and debugging databases",
        "providers": ["claude"],
        "command": "node",
        "args": ["./mcp-servers/database/index.js"],
        "env": {"DATABASE_URL": ""},
        "status": "disabled",
        "tags": ["database"],
        "tools": [{"name": "db_query", "description": "Run database queries and migrations"}],
    },
]


DEFAULT_APP_CONFIG = {
    "app": {
        "name": "Pack Agents",
        "version": "1.0.0",
        "environment": "development",
    },
    "storage": {
        "type": "file",
        "configRoot": "./config",
        "autoBackup": True,
        "maxExecutionHistory": 1000,
    },
    "execution": {
        "defaultTimeout": 300000,
        "maxRetries": 3,
        "parallelLimit": 5,
    },
}

DEFAULT_TOOLS_CONFIG = {
    "tools": {
        "claudeCode": {
            "enabled": True,
            "allowedCommands": ["read", "write", "list", "grep", "search"],
            "restrictedPaths": ["/system", "/etc", "/root"],
            "maxFileSize": "10MB",
            "timeout": 30000,
        },
        "fileSystem": {
            "enabled": True,
            "allowedExtensions": [".js", ".ts", ".jsx", ".tsx", ".json", ".md"],
            "maxDepth": 10,
        },
    },
}


def default_catalog() -> ProviderCatalog:
    return ProviderCatalog.model_validate(DEFAULT_PROVIDERS)


def built_in_templates(now: str) -> list[Template]:
    return [
        Template.model_validate({**template, "createdAt": now, "updatedAt": now})
        for template in _TEMPLATES
    ]


def built_in_mcp_servers(now: str) -> list[MCPServerDefinition]:
    return [
        MCPServerDefinition.model_validate({**server, "createdAt": now, "updatedAt": now})
        for server in _MCP_SERVERS
    ]