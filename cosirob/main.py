import argparse
import logging

from nicegui import app as ng_app
from nicegui import ui
from nicegui.elements.tooltip import Tooltip

from cosirob.common.logging_config import LEVEL_NAMES, configure_logging
from cosirob.common.theme import apply_theme, get_theme
from cosirob.constants import BACKEND_URL, LOG_LEVEL, SERVER_HOST, SERVER_PORT
from cosirob.pages.control import ControlPanel
from cosirob.pages.monitor import MonitorPage
from cosirob.pages.positions import PositionsPage
from cosirob.pages.program import ProgramPage
from cosirob.pages.settings import SettingsPage
from cosirob.protocol.types import ValidationError
from cosirob.services.robot_client import client, event_log, session
from cosirob.state import connection_state

# ------------------------ Global UI/state ------------------------

backend_status_label: ui.label | None = None
backend_tooltip: Tooltip | None = None

# Backend health check timer (1Hz)
health_timer: ui.timer | None = None

# Page instances share one session and one event log
control_panel_instance = ControlPanel(session)
program_page_instance = ProgramPage(session)
positions_page_instance = PositionsPage(session)
monitor_page_instance = MonitorPage(session, event_log)
settings_page_instance = SettingsPage(client)


# --------------- System commands ---------------


async def send_system_command(code: str) -> None:
    try:
        res = await session.send_command(code)
    except ValidationError as e:
        logging.error("%s rejected locally: %s", code, e)
        ui.notify(str(e), color="negative")
        return
    if res.error is not None:
        ui.notify(f"{code} failed: {res.error.message}", color="negative")
    else:
        ui.notify(f"Sent {code}", color="primary")


# --------------- Connectivity Check ---------------


async def check_health() -> None:
    ok = await client.health()
    if backend_status_label:
        if backend_tooltip:
            backend_tooltip.text = f"{client.base_url} {'reachable' if ok else 'unreachable'}"
        backend_status_label.style("color: #21BA45" if ok else "color: #DB2828")


def build_header_and_tabs() -> None:
    with (
        ui.header().classes("p-0"),
        ui.row().classes("w-full items-center justify-between px-3"),
    ):
        with ui.column().classes("gap-0"):
            ui.label("Cosirob Control").classes("text-lg font-medium")
            ui.label("Robot steering frontend").classes("text-xs")
        with ui.tabs() as main_tabs:
            control_tab = ui.tab("Control")
            program_tab = ui.tab("Program")
            positions_tab = ui.tab("Positions")
            monitor_tab = ui.tab("Monitor")
            settings_tab = ui.tab("Settings")

    with ui.tab_panels(main_tabs, value=control_tab).classes("w-full"):
        with ui.tab_panel(control_tab):
            control_panel_instance.build()
        with ui.tab_panel(program_tab):
            program_page_instance.build()
        with ui.tab_panel(positions_tab):
            positions_page_instance.build()
        with ui.tab_panel(monitor_tab):
            monitor_page_instance.build()
        with ui.tab_panel(settings_tab):
            settings_page_instance.build()


def build_footer() -> None:
    with ui.footer().classes("justify-between items-center px-3 py-1"):
        with ui.row().classes("items-center gap-4"):
            global backend_status_label, backend_tooltip
            backend_status_label = ui.label("BACKEND").classes("text-sm")
            with backend_status_label:
                backend_tooltip = ui.tooltip("unknown")
            ui.label("|").classes("text-sm")
            robot_label = ui.label("ROBOT").classes("text-sm")
            robot_label.bind_text_from(
                connection_state,
                "port_name",
                backward=lambda p: f"ROBOT {p}" if p else "ROBOT",
            )
            robot_label.bind_visibility_from(connection_state, "connected")
        with ui.row().classes("items-center gap-2"):
            ui.button("Enable", on_click=lambda: send_system_command("en"))
            ui.button("Disable", on_click=lambda: send_system_command("di"))
            ui.button("Clear error", on_click=lambda: send_system_command("cl")).props(
                "color=warning"
            )
            ui.button("Stop", on_click=lambda: send_system_command("st")).props(
                "color=negative"
            )


async def _app_startup() -> None:
    apply_theme(get_theme())
    ui.query(".nicegui-content").classes("p-0")
    build_header_and_tabs()
    build_footer()
    if health_timer:
        health_timer.active = True


async def _app_shutdown() -> None:
    await client.aclose()


ng_app.on_startup(_app_startup)
ng_app.on_shutdown(_app_shutdown)

health_timer = ui.timer(interval=1.0, callback=check_health, active=False)


if __name__ in {"__main__", "__mp_main__"}:
    parser = argparse.ArgumentParser(description="Cosirob NiceGUI Webserver")
    parser.add_argument("--host", default=SERVER_HOST, help="Webserver bind host")
    parser.add_argument("--port", type=int, default=SERVER_PORT, help="Webserver bind port")
    parser.add_argument(
        "--backend-url", default=BACKEND_URL, help="Base URL of the serial backend"
    )
    parser.add_argument("--log-level", choices=list(LEVEL_NAMES), help="Set log level")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity; -v=INFO, -vv=DEBUG, -vvv=TRACE",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Only WARNING and above")
    args, _ = parser.parse_known_args()

    client.base_url = args.backend_url.rstrip("/")

    # Explicit --log-level > -v/-q > env default from constants
    if args.log_level:
        runtime_log_level = LEVEL_NAMES[args.log_level]
    elif args.verbose >= 3:
        runtime_log_level = LEVEL_NAMES["TRACE"]
    elif args.verbose == 2:
        runtime_log_level = logging.DEBUG
    elif args.verbose == 1:
        runtime_log_level = logging.INFO
    elif args.quiet:
        runtime_log_level = logging.WARNING
    else:
        runtime_log_level = LOG_LEVEL

    configure_logging(runtime_log_level)
    logging.info("Webserver bind: host=%s port=%s", args.host, args.port)
    logging.info("Backend target: %s", client.base_url)

    ui.run(
        title="Cosirob Control",
        host=args.host,
        port=int(args.port),
        reload=False,
        show=False,
    )
