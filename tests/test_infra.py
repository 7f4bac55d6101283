"""Infrastructure helpers: ids, lifespan builders, logging setup."""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

import pytest
from fastapi import Depends, FastAPI

from genchat.configs.config import AppConfig, get_app_config
from genchat.configs.system import LoggingConfig
from genchat.infra.id_utils import generate_id, new_conversation_id, new_user_id
from genchat.infra.lifespan import get_app, inject
from genchat.infra.logging import setup_logging


class TestIds:
    def test_prefixes(self):
        assert new_user_id().startswith("user_")
        assert new_conversation_id().startswith("conv_")

    def test_length_and_uniqueness(self):
        ids = {generate_id("x", length=8) for _ in range(100)}

        assert len(ids) == 100
        assert all(len(i) == len("x_") + 8 for i in ids)


EVENTS: list[str] = []


async def build_first(
    app: Annotated[FastAPI, Depends(get_app)],
) -> AsyncGenerator[None, None]:
    EVENTS.append("enter first")
    app.state.first = True
    yield
    EVENTS.append("exit first")


async def build_second(
    app: Annotated[FastAPI, Depends(get_app)],
    _first: Annotated[None, Depends(build_first)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    EVENTS.append(f"enter second (port {config.api.port}, first={app.state.first})")
    yield
    EVENTS.append("exit second")


@inject
async def lifespan(
    app: FastAPI,
    _second: Annotated[None, Depends(build_second)],
) -> AsyncGenerator[None, None]:
    yield


class TestInject:
    @pytest.fixture(autouse=True)
    def clear_events(self):
        EVENTS.clear()

    @pytest.mark.asyncio
    async def test_dependencies_enter_in_order_and_exit_in_reverse(self):
        app = FastAPI()
        app.dependency_overrides[get_app_config] = lambda: AppConfig(
            api={"port": 1234}
        )

        async with lifespan(app):
            assert EVENTS == ["enter first", "enter second (port 1234, first=True)"]

        assert EVENTS[2:] == ["exit second", "exit first"]

    @pytest.mark.asyncio
    async def test_overridden_builder_is_used(self):
        async def fake_first(
            app: Annotated[FastAPI, Depends(get_app)],
        ) -> AsyncGenerator[None, None]:
            EVENTS.append("enter fake")
            app.state.first = "fake"
            yield

        app = FastAPI()
        app.dependency_overrides[build_first] = fake_first

        async with lifespan(app):
            pass

        assert EVENTS[0] == "enter fake"
        assert "enter first" not in EVENTS
        assert EVENTS[1].endswith("first=fake)")



class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers, root.level = handlers, level

    def test_json_output(self, capsys):
        setup_logging(LoggingConfig(level="info", json_output=True))

        logging.getLogger("genchat.test").info("hello %s", "world")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        assert '"message": "hello world"' in line
        assert '"logger": "genchat.test"' in line

    def test_quiet_loggers(self):
        setup_logging(LoggingConfig(quiet_loggers=["noisy.lib"], json_output=False))

        assert logging.getLogger("noisy.lib").level == logging.WARNING
        assert logging.getLogger().level == logging.INFO
