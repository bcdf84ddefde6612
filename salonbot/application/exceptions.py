class AppointmentStoreError(RuntimeError):
    """Raised when the appointment store fails to persist a booking."""
    pass


class SlotUnavailableError(AppointmentStoreError):
    """Raised when the store rejects a booking because the slot is already taken."""
    pass


class MessagingUpstreamError(RuntimeError):
    """Raised when the WhatsApp provider rejects or fails to deliver a message."""
    pass
