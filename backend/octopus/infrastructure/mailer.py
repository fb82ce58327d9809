"""Postman - renders markdown email templates and delivers them over SMTP.

Invariants:
    - Templates live in octopus/templates/mail/<name>.md and are Jinja2 + Markdown
    - Rendered bodies are HTML (markdown converted after variable substitution)
    - deliver() opens one SMTP connection per message

Design Decisions:
    - Template lookup by name through a dict-like `messages` accessor so campaigns read
      like `postman.render("signup", ...)` without knowing the loader
"""

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

import markdown
from jinja2 import Environment, PackageLoader, StrictUndefined

logger = logging.getLogger(__name__)


@dataclass
class Message:
    to: list[str]
    subject: str
    body: str


class Postman:
    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        user: str = "",
        password: str = "",
        smtp_factory=smtplib.SMTP,
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.user = user
        self.password = password
        self._smtp_factory = smtp_factory
        self._env = Environment(
            loader=PackageLoader("octopus", "templates/mail"),
            undefined=StrictUndefined,
            autoescape=False,
        )

    def render(self, name: str, variables: dict) -> str:
        """Render template `name` with variables, then markdown -> HTML."""
        text = self._env.get_template(f"{name}.md").render(**variables)
        return markdown.markdown(text)

    def deliver(self, message: Message) -> None:
        email = EmailMessage()
        email["From"] = self.sender
        email["To"] = ", ".join(message.to)
        email["Subject"] = message.subject
        email.set_content(message.body, subtype="html")

        with self._smtp_factory(self.host, self.port) as smtp:
            smtp.starttls()
            if self.user:
                smtp.login(self.user, self.password)
            smtp.send_message(email)
        logger.info(
            f"Delivered '{message.subject}'", extra={"recipient": email["To"]},
        )
