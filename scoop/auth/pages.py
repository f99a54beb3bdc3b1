"""
Inline HTML emitted by the callback.

The bootstrap page exists because the HttpOnly `authToken` cookie is not
visible to client-side API code; the page copies the token into localStorage
and then navigates.
"""

from __future__ import annotations

import html
import json

BOOTSTRAP_DELAY_MS = 500
ERROR_REDIRECT_DELAY_MS = 5000


def _js_string(value: str) -> str:
    # JSON string literal, safe inside <script>.
    return json.dumps(value).replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")


def render_bootstrap_page(token: str, redirect_url: str, *, delay_ms: int = BOOTSTRAP_DELAY_MS) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
  <title>Redirecting...</title>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <style>
    body {{
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', system-ui, sans-serif;
      display: flex;
      align-items: center;
      justify-content: center;
      min-height: 100vh;
      margin: 0;
      background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
      color: white;
    }}
    .container {{ text-align: center; }}
    .spinner {{
      width: 40px;
      height: 40px;
      border: 4px solid rgba(255,255,255,0.3);
      border-top: 4px solid white;
      border-radius: 50%;
      animation: spin 1s linear infinite;
      margin: 0 auto 20px;
    }}
    @keyframes spin {{ 0% {{ transform: rotate(0deg); }} 100% {{ transform: rotate(360deg); }} }}
  </style>
</head>
<body>
  <div class="container">
    <div class="spinner"></div>
    <p>Completing authentication...</p>
  </div>
  <script>
    (function() {{
      try {{
        var jwtToken = {_js_string(token)};
        if (jwtToken) {{
          localStorage.setItem('authToken', jwtToken);
        }}
      }} catch (error) {{
        console.error('Failed to store auth token in localStorage:', error);
      }}
      setTimeout(function() {{
        var redirectUrl = {_js_string(redirect_url)};
        window.location.href = redirectUrl || '/';
      }}, {int(delay_ms)});
    }})();
  </script>
</body>
</html>
"""


def render_error_page(kind: str, message: str, *, delay_ms: int = ERROR_REDIRECT_DELAY_MS) -> str:
    signin_url = f"/signin?error={kind}"
    return f"""<!DOCTYPE html>
<html>
<head>
  <title>Authentication Error</title>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <style>
    body {{
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', system-ui, sans-serif;
      display: flex;
      align-items: center;
      justify-content: center;
      min-height: 100vh;
      margin: 0;
      background: linear-gradient(135deg, #ff6b6b 0%, #ffa726 100%);
      color: white;
    }}
    .container {{
      text-align: center;
      background: rgba(255,255,255,0.1);
      padding: 40px;
      border-radius: 12px;
      max-width: 400px;
    }}
    h1 {{ margin: 0 0 10px; font-size: 24px; }}
    p {{ margin: 10px 0; opacity: 0.9; }}
    .retry-btn {{
      background: white;
      color: #ff6b6b;
      padding: 12px 24px;
      border-radius: 6px;
      font-weight: 600;
      margin-top: 20px;
      text-decoration: none;
      display: inline-block;
    }}
  </style>
</head>
<body>
  <div class="container">
    <h1>Authentication Error</h1>
    <p>{html.escape(message)}</p>
    <p>Please try signing in again.</p>
    <a href="/signin" class="retry-btn">Back to Sign In</a>
  </div>
  <script>
    setTimeout(function() {{
      window.location.href = {_js_string(signin_url)};
    }}, {int(delay_ms)});
  </script>
</body>
</html>
"""
