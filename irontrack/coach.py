import os
import logging
from itertools import count

import requests

logger = logging.getLogger(__name__)

COACH_API_KEY = os.environ.get("COACH_API_KEY") or os.environ.get("GEMINI_API_KEY", "")
COACH_MODEL = os.environ.get("COACH_MODEL", "gemini-2.0-flash")
COACH_BASE = os.environ.get("COACH_BASE", "https://generativelanguage.googleapis.com/v1beta")
COACH_TIMEOUT = float(os.environ.get("COACH_TIMEOUT", "15"))

EMPTY_ANSWER = "Desculpe, não consegui processar sua pergunta agora."
FAILURE_ANSWER = "Ocorreu um erro ao consultar o IronCoach. Verifique sua chave de API."

SYSTEM_INSTRUCTION = """
Você é um treinador de musculação experiente e motivador, especialista em hipertrofia e força.
Seu nome é "IronCoach".
Responda sempre em Português do Brasil.
Seja conciso, direto e útil.
Use o contexto fornecido sobre o treino/exercício do usuário para dar conselhos personalizados.
Se o usuário perguntar sobre execução, explique a técnica correta.
Se o usuário perguntar sobre progressão de carga, sugira estratégias seguras.
""".strip()


def build_prompt(query: str, context: str) -> str:
    return (
        "Contexto do Treino/Exercício Atual:\n"
        f"{context}\n\n"
        "Pergunta do Usuário:\n"
        f"{query}"
    )


def _extract_text(payload: dict) -> str:
    parts = []
    for candidate in payload.get("candidates") or []:
        for part in (candidate.get("content") or {}).get("parts") or []:
            if part.get("text"):
                parts.append(part["text"])
        if parts:
            break
    return "".join(parts).strip()


def ask_coach(query: str, context: str, api_key: str = None, model: str = None,
              timeout: float = None) -> str:
    """
    Ask the coach model. Always returns text: failures come back as a fixed
    apology so the workout flow never sees an exception from here.
    """
    api_key = api_key if api_key is not None else COACH_API_KEY
    if not api_key:
        logger.warning("Coach API key not configured")
        return FAILURE_ANSWER

    url = f"{COACH_BASE}/models/{model or COACH_MODEL}:generateContent"
    body = {
        "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
        "contents": [{"role": "user", "parts": [{"text": build_prompt(query, context)}]}],
    }
    try:
        r = requests.post(
            url,
            params={"key": api_key},
            json=body,
            timeout=timeout or COACH_TIMEOUT,
        )
        r.raise_for_status()
        text = _extract_text(r.json())
    except (requests.RequestException, ValueError) as e:
        logger.warning("Coach request failed: %s", e)
        return FAILURE_ANSWER

    return text or EMPTY_ANSWER


class CoachChat:
    """
    Question/answer log for one workout. Each question gets a ticket; an
    answer that arrives for an older ticket than the latest is dropped.
    """

    def __init__(self, messages=None, last_ticket=0):
        self.messages = list(messages or [])
        self._tickets = count(last_ticket + 1)
        self.latest = last_ticket

    def ask(self, query: str) -> int:
        self.latest = next(self._tickets)
        self.messages.append({"ticket": self.latest, "role": "user", "text": query})
        return self.latest

    def answer(self, ticket: int, text: str) -> bool:
        if ticket != self.latest:
            return False
        self.messages.append({"ticket": ticket, "role": "coach", "text": text})
        return True

    def to_dict(self) -> dict:
        return {"messages": self.messages, "last_ticket": self.latest}

    @classmethod
    def from_dict(cls, data) -> "CoachChat":
        data = data or {}
        return cls(messages=data.get("messages"), last_ticket=int(data.get("last_ticket") or 0))
