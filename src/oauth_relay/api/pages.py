import json

from fastapi.responses import HTMLResponse

COMPLETION_MESSAGE = {"type": "oauth:complete"}

_COMPLETION_TEMPLATE = """<!doctype html><html><body>
<script>
if(window.opener){{try{{window.opener.postMessage({message},'*')}}catch(e){{}};window.close();}}
else{{location.replace({success_path});}}
</script>
Success. You can close this window.
</body></html>"""

_SUCCESS_PAGE = """<!doctype html><html><head><title>Signed in</title></head><body>
<p>You are signed in. You can close this window.</p>
</body></html>"""


def completion_page(success_path: str) -> HTMLResponse:
    """Popup page that notifies the opener and closes, or falls back to a redirect."""
    html = _COMPLETION_TEMPLATE.format(
        message=json.dumps(COMPLETION_MESSAGE, separators=(",", ":")),
        success_path=json.dumps(success_path),
    )
    return HTMLResponse(html)


def success_page() -> HTMLResponse:
    return HTMLResponse(_SUCCESS_PAGE)
