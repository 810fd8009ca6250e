from .payload import MessagePayload, construct_message_payload, text_message, raw_message

__all__ = ["MessagePayload", "construct_message_payload", "text_message", "raw_message"]
