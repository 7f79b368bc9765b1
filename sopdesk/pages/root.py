"""Root landing page with links to the API docs."""


def render_root_page(app_name: str, app_version: str) -> str:
    """Return HTML for the root landing page."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{app_name}</title>
    <style>
        body {{ font-family: system-ui, sans-serif; margin: 0; padding: 3rem 1rem; background: #0f172a; color: #e2e8f0; }}
        main {{ max-width: 520px; margin: 0 auto; }}
        h1 {{ font-size: 1.6rem; margin-bottom: 0.25rem; }}
        p {{ color: #94a3b8; }}
        a {{ color: #38bdf8; text-decoration: none; }}
        ul {{ padding-left: 1.2rem; line-height: 1.8; }}
        code {{ background: #1e293b; padding: 0.1rem 0.35rem; border-radius: 4px; }}
    </style>
</head>
<body>
    <main>
        <h1>{app_name}</h1>
        <p>SOPs, employees and training for your team. API version {app_version}.</p>
        <ul>
            <li><a href="/docs">Interactive API docs</a></li>
            <li><a href="/redoc">ReDoc</a></li>
            <li><a href="/api/v1/health">Health</a></li>
        </ul>
        <p>Authenticate with <code>Authorization: Bearer &lt;Firebase ID token&gt;</code>.</p>
    </main>
</body>
</html>
"""
