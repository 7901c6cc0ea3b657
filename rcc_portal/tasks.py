from urllib.parse import urlencode

from rcc_portal.core.celery_config import celery_app
from rcc_portal.core.config import SITE_URL
from rcc_portal.services.mail import mailer


def password_reset_link(token: str) -> str:
    return f"{SITE_URL}/auth?{urlencode({'type': 'recovery', 'token': token})}"


@celery_app.task(bind=True)
def send_password_reset_email_task(self, email: str, token: str):
    """Mail the password recovery link."""
    body = (
        "Recebemos um pedido para redefinir sua senha.\n\n"
        f"Acesse o link abaixo para criar uma nova senha:\n{password_reset_link(token)}\n\n"
        "Se você não fez este pedido, ignore este e-mail."
    )
    mailer.send(email, "Redefinição de senha - RCC", body)
