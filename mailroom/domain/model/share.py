"""Mailbox sharing value objects."""

from mailroom.domain.value import ShareType, UserId, ValueObject


class MailboxShare(ValueObject):
    """One access grant on a mailbox.

    The directory stores grants as ``"<uid>:<type>"`` strings.
    """

    user: UserId
    type: ShareType

    @classmethod
    def parse(cls, raw: str) -> "MailboxShare | None":
        """Parse a stored grant, ``None`` if it is malformed."""
        user, sep, right = raw.rpartition(":")
        if not sep or not user:
            return None
        try:
            return cls(user=UserId(user), type=ShareType(right))
        except ValueError:
            return None

    def __str__(self) -> str:
        return f"{self.user}:{self.type.value}"


class ObjectShare(ValueObject):
    """A user acting on another user's mailbox.

    Object-share uids join both sides with a delimiter: ``jdoe.-.team``.
    """

    user_uid: UserId
    mailbox_uid: UserId
    delimiter: str

    @classmethod
    def parse(cls, uid: str, delimiter: str) -> "ObjectShare | None":
        if not delimiter or delimiter not in uid:
            return None
        user, _, mailbox = uid.partition(delimiter)
        if not user or not mailbox:
            return None
        return cls(user_uid=UserId(user), mailbox_uid=UserId(mailbox), delimiter=delimiter)

    @property
    def uid(self) -> str:
        return f"{self.user_uid}{self.delimiter}{self.mailbox_uid}"
