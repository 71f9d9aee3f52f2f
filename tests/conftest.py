import sys
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from exp_tracker.bot import BotConfig, ConversationStates, ExpenseBot
from exp_tracker.database import ExpenseStorage
from exp_tracker.report import VisualizationService

TODAY = date(2026, 10, 17)
USER_ID = 42
CHAT_ID = 4242


# ============== Shared Dummy / Mock Objects ==============


class DummyUser:
    """Mock user object."""
    def __init__(self, user_id=USER_ID):
        self.id = user_id


class DummyChat:
    """Mock chat object."""
    def __init__(self, chat_id=CHAT_ID):
        self.id = chat_id


class DummyMessage:
    """Mock message object for testing."""
    def __init__(self, message_id, text=None):
        self.message_id = message_id
        self.text = text


class DummyCallbackQuery:
    """Mock callback query object."""
    def __init__(self, data, message_id, query_id="cbq"):
        self.id = query_id
        self.data = data
        self.message = DummyMessage(message_id) if message_id is not None else None


class DummyUpdate:
    """Mock update object for testing."""
    def __init__(self, update_id, message=None, callback_query=None, user_id=USER_ID, chat_id=CHAT_ID):
        self.update_id = update_id
        self.message = message
        self.callback_query = callback_query
        self.effective_user = DummyUser(user_id) if user_id is not None else None
        self.effective_chat = DummyChat(chat_id) if chat_id is not None else None


def text_update(update_id, message_id, text, **kwargs):
    return DummyUpdate(update_id, message=DummyMessage(message_id, text), **kwargs)


def callback_update(update_id, message_id, data, **kwargs):
    return DummyUpdate(update_id, callback_query=DummyCallbackQuery(data, message_id), **kwargs)


class DummyBot:
    """Records outgoing requests and serves queued updates."""
    def __init__(self):
        self.pending = []
        self.get_updates_calls = []
        self.texts = []
        self.deleted = []
        self.photos = []
        self.answered = []
        self._next_message_id = 1000

    async def get_updates(self, offset=None, limit=None, allowed_updates=None, **kwargs):
        self.get_updates_calls.append({"offset": offset, "limit": limit, "allowed_updates": allowed_updates})
        updates = [u for u in self.pending if u.update_id >= (offset or 0)]
        return updates[:limit] if limit else updates

    async def send_message(self, chat_id, text, reply_markup=None, **kwargs):
        self._next_message_id += 1
        self.texts.append({"chat_id": chat_id, "text": text, "reply_markup": reply_markup})
        message = MagicMock()
        message.message_id = self._next_message_id
        return message

    async def delete_message(self, chat_id, message_id, **kwargs):
        self.deleted.append((chat_id, message_id))
        return True

    async def send_photo(self, chat_id, photo=None, caption=None, **kwargs):
        self.photos.append({"chat_id": chat_id, "photo": photo, "caption": caption})
        return MagicMock()

    async def answer_callback_query(self, callback_query_id, **kwargs):
        self.answered.append(callback_query_id)
        return True

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None


# ============== Shared Fixtures ==============


@pytest.fixture()
def storage(tmp_path):
    """Create a fresh ExpenseStorage with a temp database."""
    return ExpenseStorage(db_path=str(tmp_path / "test_expenses.db"))


@pytest.fixture()
def states():
    return ConversationStates()


@pytest.fixture()
def dummy_bot():
    return DummyBot()


@pytest.fixture()
def bot_instance(dummy_bot, storage, states):
    """Create ExpenseBot wired to the dummy Telegram bot and a temp database."""
    config = BotConfig(token="123:TEST", db_path=storage.db_path, poll_interval=0.01)
    return ExpenseBot(
        config,
        bot=dummy_bot,
        storage=storage,
        states=states,
        viz=VisualizationService(),
        today=lambda: TODAY,
    )
