from pydantic import BaseModel


class SendMessageRequestSchema(BaseModel):
    to: str | None = None
    message: str | None = None


class StatusResponseSchema(BaseModel):
    status: str


class ReminderRunResponseSchema(BaseModel):
    sent: int
    expired_conversations: int
