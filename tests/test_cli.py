import asyncio
import io
from unittest.mock import AsyncMock, patch

import pytest
from rich.console import Console

from sysfetch import cli
from sysfetch.errors import UnsupportedPlatform
from sysfetch.models import MetricSample, Snapshot
from sysfetch.report import BAR_WIDTH, bar_chart, info_list, layout, render_bar

SNAPSHOT = Snapshot(
    user="ada",
    os_version="6.8.0-45-generic",
    cpu=MetricSample(display="Intel(R) Core(TM) i7 @ 1.80 GHz [50.00% Utilization]", utilization=50),
    gpu=MetricSample.empty(),
    disk=MetricSample(display="125.00GB / 500.00GB (375.00GB free)", utilization=25),
    memory=MetricSample(display="6.00GB / 16.00GB (10.00GB free)", utilization=100),
)


def plain_lines(renderable):
    console = Console(file=io.StringIO(), width=200, color_system=None)
    console.print(renderable)
    return [line.rstrip() for line in console.file.getvalue().splitlines()]


def test_render_bar():
    assert render_bar(0, 10) == "░" * 10
    assert render_bar(50, 10) == "█" * 5 + "░" * 5
    assert render_bar(100, 10) == "█" * 10


def test_bar_chart_rows_follow_utilization_order():
    lines = plain_lines(bar_chart(SNAPSHOT))

    assert len(lines) == 4
    assert lines[0].startswith("CPU ")
    assert lines[0].endswith(" 50%")
    assert lines[1].startswith("GPU ")
    assert lines[1].endswith("  0%")
    assert render_bar(25, BAR_WIDTH) in lines[2]
    assert lines[3].startswith("MEM ")
    assert lines[3].endswith("100%")


def test_info_list_keeps_field_order():
    lines = plain_lines(info_list(SNAPSHOT))

    assert len(lines) == 6
    for line, text in zip(lines, SNAPSHOT.lines()):
        assert line.endswith(text)


def test_layout_places_bars_beside_info():
    lines = plain_lines(layout(SNAPSHOT))

    assert len(lines) == 6
    assert sum("%" in line and BAR_WIDTH * "█" in line for line in lines) == 1
    assert any("░" in line and "6.8.0-45-generic" in line for line in lines)


def test_parser_defaults():
    args = cli.build_parser().parse_args([])
    assert args.live is False
    assert args.interval == 1.0


def test_parser_live_flags():
    assert cli.build_parser().parse_args(["-l"]).live is True
    assert cli.build_parser().parse_args(["--live", "--interval", "5"]).interval == 5.0


@pytest.mark.asyncio
async def test_run_once_prints_report(capsys):
    coordinator = AsyncMock()
    coordinator.collect_snapshot.return_value = SNAPSHOT

    assert await cli.run_once(coordinator) == 0
    assert "ada" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_run_once_reports_collection_error(capsys):
    coordinator = AsyncMock()
    coordinator.collect_snapshot.side_effect = UnsupportedPlatform("darwin")

    assert await cli.run_once(coordinator) == 1
    assert capsys.readouterr().out == ""


def test_main_one_shot_exit_code():
    with patch("sysfetch.cli.SnapshotCoordinator") as coordinator_cls:
        coordinator_cls.return_value.collect_snapshot = AsyncMock(return_value=SNAPSHOT)
        assert cli.main([]) == 0


def test_main_rejects_non_positive_interval():
    assert cli.main(["--live", "--interval", "0"]) == 2


@pytest.mark.asyncio
async def test_run_live_keeps_refreshing_after_failed_collection():
    coordinator = AsyncMock()
    coordinator.collect_snapshot.side_effect = [
        UnsupportedPlatform("darwin"),
        SNAPSHOT,
        asyncio.CancelledError(),
    ]

    with pytest.raises(asyncio.CancelledError):
        await cli.run_live(coordinator, 0.01)

    assert coordinator.collect_snapshot.await_count == 3
