from .actions import (
    DeleteAttachmentAction,
    DeleteEntityAction,
    RowAction,
    SendDocumentAction,
    SetStatusAction,
    UpdateFieldsAction,
    UploadAttachmentAction,
)
from .dispatcher import DispatchResult, RowActionDispatcher
from .model import CollectionCommand, Column, FormField, StatusSet
from .notifications import Notification, NotificationChannel
from .projection import ViewState, project
from .screen import ListScreen, ScreenConfig
from .store import RemoteCollectionStore

__all__ = [
    "CollectionCommand",
    "Column",
    "DeleteAttachmentAction",
    "DeleteEntityAction",
    "DispatchResult",
    "FormField",
    "ListScreen",
    "Notification",
    "NotificationChannel",
    "RemoteCollectionStore",
    "RowAction",
    "RowActionDispatcher",
    "ScreenConfig",
    "SendDocumentAction",
    "SetStatusAction",
    "StatusSet",
    "UpdateFieldsAction",
    "UploadAttachmentAction",
    "ViewState",
    "project",
]
