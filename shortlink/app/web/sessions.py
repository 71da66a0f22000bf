from collections import OrderedDict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from shortlink.app.core.config import settings
from shortlink.app.state import CollectionManager, CreationFlowController, QrRevealController


if TYPE_CHECKING:
    from shortlink.app.services.client import LinkServiceClient


logger = structlog.get_logger(__name__)


@dataclass
class UserWorkspace:
    """Client-side state of one device: its form, its link list and its QR selection."""

    user_id: str
    creation: CreationFlowController
    collection: CollectionManager
    qr: QrRevealController = field(default_factory=QrRevealController)
    alert: str | None = None

    @classmethod
    def create(cls, user_id: str, client: "LinkServiceClient") -> "UserWorkspace":
        return cls(
            user_id=user_id,
            creation=CreationFlowController(client, user_id),
            collection=CollectionManager(client),
        )

    def flash(self, message: str) -> None:
        self.alert = message

    def pop_alert(self) -> str | None:
        alert, self.alert = self.alert, None
        return alert


class WorkspaceRegistry:
    """Least-recently-used map of user id to :class:`UserWorkspace`."""

    def __init__(self, max_size: int | None = None) -> None:
        self.max_size = max_size or settings.MAX_WORKSPACES
        self._workspaces: OrderedDict[str, UserWorkspace] = OrderedDict()

    def __len__(self) -> int:
        return len(self._workspaces)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._workspaces

    def get(self, user_id: str, client: "LinkServiceClient") -> UserWorkspace:
        workspace = self._workspaces.get(user_id)
        if workspace is None:
            workspace = UserWorkspace.create(user_id, client)
            self._workspaces[user_id] = workspace
            while len(self._workspaces) > self.max_size:
                evicted, _ = self._workspaces.popitem(last=False)
                logger.debug("Evicted workspace", user_id=evicted)
        else:
            self._workspaces.move_to_end(user_id)
        return workspace
