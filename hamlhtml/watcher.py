import logging
from pathlib import Path
from typing import Dict

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .compiler import HamlCompiler
from .config import HamlConfig
from .errors import HamlStructuralError

logger = logging.getLogger(__name__)


def trigger_recompile(write_pairs: Dict[Path, Path], compiler: HamlCompiler) -> int:
    """
    Compiles every source to its destination and returns how many were written.
    A source that fails to compile, or a destination that cannot be written,
    is logged and skipped.
    """
    written = 0
    for (src, dst) in write_pairs.items():
        try:
            with open(src, "r") as f:
                html = compiler.compile(f.read())
        except (OSError, HamlStructuralError) as e:
            logger.error("Failed to compile %s: %s", src, e)
            continue
        try:
            with open(dst, "w+") as f:
                f.write(html)
        except OSError as e:
            logger.error("Failed to write %s: %s", dst, e)
            continue
        logger.info("Wrote %s", dst)
        written += 1
    return written


class ChangeHandler(FileSystemEventHandler):
    def __init__(self, files_to_watch, write_pairs: Dict[Path, Path], compiler: HamlCompiler):
        self.files_to_watch = {Path(x).resolve() for x in files_to_watch}
        self.write_pairs = write_pairs
        self.compiler = compiler
        logger.info("Handler initialized. Monitoring for changes...")

    def on_modified(self, event):
        if event.is_directory:
            return

        src_path_abs = Path(event.src_path).resolve()
        if src_path_abs in self.files_to_watch:
            logger.info("Detected modification in: %s", src_path_abs)
            trigger_recompile(self.write_pairs, self.compiler)


def run_watcher(config: HamlConfig):
    """Sets up and runs the watchdog observer."""
    files_to_watch = set(config.write_pairs.keys()) | config.watch_paths
    dirs_to_watch = {p.resolve().parent for p in files_to_watch}

    if not dirs_to_watch:
        logger.error("No valid directories provided to watch.")
        return

    logging.basicConfig(level=logging.INFO,
                        format='%(asctime)s - %(message)s',
                        datefmt='%Y-%m-%d %H:%M:%S')

    compiler = HamlCompiler(config.options)
    trigger_recompile(config.write_pairs, compiler)

    event_handler = ChangeHandler(files_to_watch, config.write_pairs, compiler)
    observer = Observer()

    scheduled_count = 0
    for dir_path in dirs_to_watch:
        if not dir_path.is_dir():
            logger.warning("Directory '%s' does not exist. Cannot watch.", dir_path)
            continue
        # Only direct children of each directory are watched
        observer.schedule(event_handler, str(dir_path), recursive=False)
        scheduled_count += 1
        logger.info("Scheduled watcher for directory: %s", dir_path)

    if scheduled_count == 0:
        logger.error("No watchers were successfully scheduled. Exiting.")
        return

    observer.start()
    logger.info("Watching for file changes in %d director%s. Press Ctrl+C to stop.",
                scheduled_count, 'y' if scheduled_count == 1 else 'ies')

    try:
        while observer.is_alive():
            observer.join(timeout=1)
    except KeyboardInterrupt:
        logger.info("Stopping watcher (Ctrl+C pressed)...")
    finally:
        if observer.is_alive():
            observer.stop()
        observer.join()
        logger.info("Watcher stopped completely.")
