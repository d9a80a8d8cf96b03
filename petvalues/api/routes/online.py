from __future__ import annotations

from fastapi import APIRouter, Response

from petvalues.core.config import settings
from petvalues.schemas.pets import OnlineCountResponse

router = APIRouter(tags=["Pets"])


@router.get("/online", response_model=OnlineCountResponse)
def online_count(response: Response) -> OnlineCountResponse:
    """Online user counter shown on the public page.

    Placeholder until sessions are tracked: reports ``APP_ONLINE_COUNT``.
    Shares the public listing's CDN cache policy.
    """

    response.headers["Cache-Control"] = settings.app.public_cache_control
    return OnlineCountResponse(count=settings.app.online_count)
