from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.app.services.mail_sender import IMailSender
from src.depends import get_mail_sender

router = APIRouter(prefix="/debug", tags=["Debug"])


@router.get("/mail/verify")
async def verify_mail_transport(mailer: IMailSender = Depends(get_mail_sender)):
    """
    Check SMTP connectivity and credentials.

    Returns:
        - 200 OK: {"ok": true}
        - 502 Bad Gateway: transport not configured or unreachable
    """
    result = await mailer.verify()
    if result.ok:
        return {"ok": True}
    return JSONResponse(status_code=502, content={"ok": False, "error": result.error or "verify failed"})
