"""
Moderation endpoints (admin token in the `token` query parameter).

Endpoints:
- GET /api/pending/{slug} - Pending memories (JSON)
- POST /api/approve/{slug}/{memory_id} - Publish a pending memory
- POST /api/reject/{slug}/{memory_id} - Delete a pending memory and its photo
- GET /api/review/{slug} - Minimal HTML review page (asks for the token when missing)
"""

import html

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from gentlytold.api.deps import get_moderation_queue
from gentlytold.api.schemas import MemoryResponse, ModerationResponse
from gentlytold.components.moderation import ModerationQueue
from gentlytold.domain.entities import Memory
from gentlytold.domain.errors import AuthorizationError

router = APIRouter()


@router.get(
    "/pending/{slug}",
    response_model=list[MemoryResponse],
    response_model_exclude_none=True,
)
def list_pending(
    slug: str,
    token: str | None = Query(None),
    queue: ModerationQueue = Depends(get_moderation_queue),
) -> list[MemoryResponse]:
    return [MemoryResponse.from_memory(m) for m in queue.list_pending(slug, token)]


@router.post("/approve/{slug}/{memory_id}", response_model=ModerationResponse)
def approve_memory(
    slug: str,
    memory_id: str,
    token: str | None = Query(None),
    queue: ModerationQueue = Depends(get_moderation_queue),
) -> ModerationResponse:
    result = queue.approve(slug, memory_id, token)
    return ModerationResponse(id=result.memory_id, remaining=result.remaining_pending)


@router.post("/reject/{slug}/{memory_id}", response_model=ModerationResponse)
def reject_memory(
    slug: str,
    memory_id: str,
    token: str | None = Query(None),
    queue: ModerationQueue = Depends(get_moderation_queue),
) -> ModerationResponse:
    result = queue.reject(slug, memory_id, token)
    return ModerationResponse(id=result.memory_id, remaining=result.remaining_pending)


@router.get("/review/{slug}", response_class=HTMLResponse)
def review_page(
    slug: str,
    token: str | None = Query(None),
    queue: ModerationQueue = Depends(get_moderation_queue),
) -> HTMLResponse:
    try:
        pending = queue.list_pending(slug, token)
    except AuthorizationError as e:
        # Reviewer notifications link here without the token; ask for it
        return HTMLResponse(
            render_token_prompt(slug, e.message if token else ""),
            status_code=e.status_code,
            headers={"Cache-Control": "no-store"},
        )
    return HTMLResponse(
        render_review_page(slug, token or "", pending),
        headers={"Cache-Control": "no-store"},
    )


def render_token_prompt(slug: str, error: str) -> str:
    esc = html.escape
    notice = f'<p role="alert">{esc(error)}</p>' if error else ""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Review memories &middot; {esc(slug)}</title>
</head>
<body>
<h1>Memories awaiting review</h1>
<p>Enter the admin token for <code>{esc(slug)}</code> to review its memories.</p>
{notice}
<form method="get" action="/api/review/{esc(slug)}">
  <label>Admin token <input type="password" name="token" autocomplete="off" required></label>
  <button>Open review</button>
</form>
</body>
</html>"""


def render_review_page(slug: str, token: str, pending: list[Memory]) -> str:
    esc = html.escape
    rows = []
    for m in pending:
        author = esc(m.author_name)
        if m.relationship:
            author += f" <small>({esc(m.relationship)})</small>"
        photo = ""
        if m.photo_reference:
            photo = f'<img src="/api/photo/{esc(m.photo_reference)}" alt="" style="max-width:240px">'
        query = f"?token={esc(token)}"
        rows.append(
            f"""<li>
  <p><strong>{author}</strong> &middot; {esc(m.submitted_at.strftime("%Y-%m-%d %H:%M"))} UTC</p>
  <blockquote>{esc(m.text)}</blockquote>
  {photo}
  <form method="post" action="/api/approve/{esc(slug)}/{esc(m.id)}{query}"><button>Approve</button></form>
  <form method="post" action="/api/reject/{esc(slug)}/{esc(m.id)}{query}"><button>Reject</button></form>
</li>"""
        )

    body = "\n".join(rows) if rows else "<p>No memories are waiting for review.</p>"
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Review memories &middot; {esc(slug)}</title>
</head>
<body>
<h1>Memories awaiting review</h1>
<p>{len(pending)} pending for <code>{esc(slug)}</code></p>
<ul>
{body}
</ul>
</body>
</html>"""
