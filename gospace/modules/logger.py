import datetime
import json
import os
import threading

from rich.console import Console
from rich.markup import escape

from gospace.modules.config import config

# Set from the global --quiet / --no-color flags
_console_options = {"quiet": False, "no_color": False}


def configure_console(quiet: bool = False, no_color: bool = False):
    _console_options["quiet"] = quiet
    _console_options["no_color"] = no_color


class Logger:
    LEVELS = {
        "debug": 10,
        "info": 20,
        "success": 25,
        "warning": 30,
        "error": 40,
    }

    LOG_STYLES = {
        "DEBUG": "bright_black",
        "INFO": "blue",
        "SUCCESS": "green",
        "WARNING": "yellow",
        "ERROR": "red",
    }

    def __init__(self, name="gospace", settings=None):
        settings = config if settings is None else settings
        self.name = name
        self.log_file = settings.get("logging", "log_file", fallback="/var/log/gospace.log")
        self.color_output = settings.getboolean("logging", "color_output", fallback=True)
        self.log_to_file = settings.getboolean("logging", "log_to_file", fallback=False)
        self.log_to_console = settings.getboolean("logging", "log_to_console", fallback=True)
        self.use_utc = settings.getboolean("logging", "timestamp_utc", fallback=False)
        self.log_format = settings.get("logging", "log_format", fallback="text").lower()
        self.max_log_size_kb = settings.getint("logging", "max_log_size_kb", fallback=0)

        level_str = settings.get("logging", "level", fallback="info").lower()
        self.min_level = self.LEVELS.get(level_str, 20)

        if self.log_to_file:
            self._ensure_dir(self.log_file)

        self._lock = threading.Lock()

    def _ensure_dir(self, filepath):
        dirpath = os.path.dirname(filepath)
        if not dirpath:
            return
        try:
            os.makedirs(dirpath, exist_ok=True)
        except OSError as e:
            self.log_to_file = False
            self._console().print(f"Logger: failed to create log directory {escape(dirpath)}: {e}")

    def _console(self):
        color = self.color_output and not _console_options["no_color"]
        return Console(stderr=True, soft_wrap=True, highlight=False,
                       color_system="auto" if color else None)

    def _get_timestamp(self):
        if self.use_utc:
            now = datetime.datetime.now(datetime.timezone.utc)
        else:
            now = datetime.datetime.now()
        return now.strftime("%Y-%m-%d %H:%M:%S")

    def _rotate_if_needed(self, filepath):
        if self.max_log_size_kb <= 0:
            return
        if os.path.exists(filepath) and os.path.getsize(filepath) > self.max_log_size_kb * 1024:
            rotated = filepath + ".1"
            try:
                if os.path.exists(rotated):
                    os.remove(rotated)
                os.rename(filepath, rotated)
            except OSError as e:
                self._console().print(f"Logger: failed to rotate log {escape(filepath)}: {e}")

    def _write_file(self, filepath, message):
        if not self.log_to_file:
            return
        self._rotate_if_needed(filepath)
        try:
            with open(filepath, "a", encoding="utf-8") as f:
                f.write(message + "\n")
        except OSError as e:
            self._console().print(f"Logger: failed to write log file {escape(filepath)}: {e}")

    def _format_text(self, level, message):
        timestamp = self._get_timestamp()
        return f"[{timestamp}] [{self.name}] [{level}] {message}"

    def _format_json(self, level, message):
        return json.dumps({
            "timestamp": self._get_timestamp(),
            "logger": self.name,
            "level": level,
            "message": message
        })

    def _format_message(self, level, message):
        if self.log_format == "json":
            return self._format_json(level, message)
        return self._format_text(level, message)

    def _log_to_console(self, formatted, level):
        if not self.log_to_console:
            return
        if _console_options["quiet"] and self.LEVELS[level.lower()] < self.LEVELS["warning"]:
            return
        style = self.LOG_STYLES.get(level) if self.log_format == "text" else None
        self._console().print(escape(formatted), style=style)

    def _should_log(self, level):
        return self.LEVELS.get(level.lower(), 0) >= self.min_level

    def log(self, level, message):
        level = level.upper()
        if not self._should_log(level):
            return

        formatted = self._format_message(level, message)
        with self._lock:
            self._log_to_console(formatted, level)
            self._write_file(self.log_file, formatted)

    def debug(self, message):
        self.log("DEBUG", message)

    def info(self, message):
        self.log("INFO", message)

    def success(self, message):
        self.log("SUCCESS", message)

    def warning(self, message):
        self.log("WARNING", message)

    def error(self, message):
        self.log("ERROR", message)
