"""
Command line interface with an offline registry.
"""

import pytest

from ragwriter.agents.chat_provider import ScriptedChatProvider
from ragwriter.agents.registry import ServiceRegistry
from ragwriter.cli import main
from ragwriter.core.config import Settings


@pytest.fixture
def chat():
    return ScriptedChatProvider()


@pytest.fixture
def registry(chat):
    settings = Settings(store_provider="memory", llm_provider="mock", embed_provider="hash", embed_dimension=16)
    return ServiceRegistry(settings=settings, chat_provider=chat)


def test_help(capsys):
    assert main(["help"]) == 0
    assert "ask" in capsys.readouterr().out


def test_ask_prints_answer(capsys, chat, registry):
    chat.queue("Embeddings are vectors.")

    assert main(["ask", "What is an embedding?"], registry=registry) == 0

    assert "Embeddings are vectors." in capsys.readouterr().out
    assert registry.store.count() == 1


def test_ask_failure_exits_nonzero(capsys, chat, registry):
    chat.queue(RuntimeError("offline"))

    assert main(["ask", "What is an embedding?"], registry=registry) == 1

    assert "generation_failure" in capsys.readouterr().err


def test_write_blog_unapproved_note(capsys, chat, registry):
    chat.queue("d0", "NEEDS_IMPROVEMENT: a", "d1", "NEEDS_IMPROVEMENT: b", "d2", "NEEDS_IMPROVEMENT: c", "d3")

    assert main(["write-blog", "Topic"], registry=registry) == 0

    captured = capsys.readouterr()
    assert "d3" in captured.out
    assert "did not approve" in captured.err


def test_history(capsys, chat, registry):
    assert main(["history"], registry=registry) == 0
    assert "No interactions" in capsys.readouterr().out

    chat.queue("answer one")
    main(["ask", "question one"], registry=registry)
    capsys.readouterr()

    assert main(["history", "--limit", "5"], registry=registry) == 0
    out = capsys.readouterr().out
    assert "Q: question one" in out
    assert "A: answer one" in out
