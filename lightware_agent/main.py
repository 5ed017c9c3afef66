"""Main application entry point for the Lightware polling agent."""

import argparse
import asyncio
import logging
import signal
import sys
import time
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .config.loader import ConfigLoader
from .config.models import AgentConfig
from .config.settings import Settings
from .collectors.errors import CollectionCycleError
from .collectors.lightware_collector import LightwareCollector
from .services.accumulator import Accumulator, LoggingAccumulator
from .utils.logger import setup_logger


class LightwareAgent:
    """
    Main polling application.

    Runs collection cycles on an interval, or once on demand, and hands
    every device record to an accumulator.
    """

    def __init__(
        self,
        config_path: str = "config/config.yaml",
        poll_interval: Optional[float] = None,
        log_level: str = "INFO",
        accumulator: Optional[Accumulator] = None
    ):
        """
        Initialize polling application.

        Args:
            config_path: Path to configuration file
            poll_interval: Seconds between cycles, overrides the config file
            log_level: Logging level for the agent logger
            accumulator: Sink for collected records (default: log each record)
        """
        self.config_path = config_path
        self.logger = setup_logger("lightware_agent", log_level)
        self.scheduler = None
        self._stop_event = None

        self.logger.info("Lightware polling agent")

        # Load configuration
        self.config = self._load_config()
        if poll_interval:
            self.config.monitoring.interval_s = poll_interval

        self.accumulator = accumulator or LoggingAccumulator(self.logger)
        self.collector = LightwareCollector(self.config.lightware, self.logger)
        self.logger.info(
            f"Initialized collector for {len(self.config.lightware.devices)} device(s)"
        )

    def _load_config(self) -> AgentConfig:
        """
        Load and validate configuration.

        Returns:
            AgentConfig: Loaded configuration

        Raises:
            SystemExit: If configuration is invalid
        """
        try:
            self.logger.info(f"Loading configuration from {self.config_path}")
            config = ConfigLoader.load_from_file(self.config_path)
            self.logger.info("Configuration loaded successfully")
            return config

        except FileNotFoundError:
            self.logger.error(
                f"Configuration file not found: {self.config_path}\n"
                "Print a starting point with: lightware-agent --sample-config"
            )
            sys.exit(1)

        except Exception as e:
            self.logger.error(
                f"Failed to load configuration: {e}",
                exc_info=True
            )
            sys.exit(1)

    async def run_collection_cycle(self):
        """
        Execute one collection cycle across all configured devices.

        Raises:
            CollectionCycleError: A collector crashed or a device task failed
                unexpectedly. Per-path and identity fetch failures are not
                cycle failures; they only show up in logs and result_code.
        """
        try:
            self.logger.info("Starting collection cycle")
            start_time = time.time()
            errors_before = self.accumulator.error_count

            await self.collector.collect(self.accumulator)

            # safe_collect reports crashes to the accumulator instead of raising
            error_count = self.accumulator.error_count - errors_before
            if error_count:
                raise CollectionCycleError(error_count)

            duration = time.time() - start_time
            self.logger.info(
                f"Collection cycle completed in {duration:.1f}s",
                extra={"duration_s": round(duration, 3)}
            )

        except Exception as e:
            self.logger.error(
                "Collection cycle failed",
                exc_info=True,
                extra={
                    "error_type": type(e).__name__,
                    "error_message": str(e)
                }
            )
            # Re-raise in run-once mode to signal failure
            raise

    def _signal_handler(self):
        """Handle shutdown signals."""
        self.logger.info("Received shutdown signal, initiating graceful shutdown...")
        if self._stop_event is not None:
            self._stop_event.set()

    async def run_scheduler(self):
        """
        Run collection cycles with APScheduler until SIGINT/SIGTERM.

        The first cycle runs immediately; later cycles follow the configured
        interval. Overlapping cycles are never started.
        """
        interval = self.config.monitoring.interval_s
        self.logger.info(f"Starting scheduler, interval {interval}s")

        self._stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        for signum in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(signum, self._signal_handler)

        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            self.run_collection_cycle,
            trigger=IntervalTrigger(seconds=interval),
            id='collection_cycle',
            name='Lightware Collection Cycle',
            max_instances=1,  # Prevent overlapping executions
            coalesce=True,  # If missed, run once
            misfire_grace_time=max(1, int(interval))
        )
        self.scheduler.start()

        # Run first cycle immediately on startup
        try:
            await self.run_collection_cycle()
        except Exception:
            self.logger.warning("Initial collection cycle failed, continuing on schedule")

        try:
            self.logger.info("Scheduler running. Press Ctrl+C to exit.")
            await self._stop_event.wait()
        finally:
            if self.scheduler.running:
                self.scheduler.shutdown(wait=False)
            self.logger.info("Scheduler stopped")


def main():
    """
    CLI entry point.

    Parses command-line arguments and starts the polling agent.
    """
    settings = Settings()

    parser = argparse.ArgumentParser(
        description=LightwareCollector.description(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Poll on the configured interval (default)
  python -m lightware_agent.main

  # Run one collection cycle and exit
  python -m lightware_agent.main --run-once

  # Poll every 10 seconds with a custom config file
  python -m lightware_agent.main --config /path/to/config.yaml --poll-interval 10
        """
    )

    parser.add_argument(
        '--config',
        default=settings.CONFIG_PATH,
        help='Path to configuration file (default: config/config.yaml or LIGHTWARE_CONFIG env var)'
    )

    parser.add_argument(
        '--run-once',
        action='store_true',
        help='Run one collection cycle and exit (no scheduler)'
    )

    parser.add_argument(
        '--poll-interval',
        type=float,
        default=None,
        help='Seconds between collection cycles (overrides monitoring.interval_s)'
    )

    parser.add_argument(
        '--sample-config',
        action='store_true',
        help='Print an example configuration file and exit'
    )

    parser.add_argument(
        '--log-level',
        default=settings.LOG_LEVEL.upper(),
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: INFO or LOG_LEVEL env var)'
    )

    args = parser.parse_args()

    if args.sample_config:
        print(LightwareCollector.sample_config())
        sys.exit(0)

    try:
        app = LightwareAgent(
            config_path=args.config,
            poll_interval=args.poll_interval,
            log_level=args.log_level
        )

        if args.run_once:
            exit_code = 0
            try:
                asyncio.run(app.run_collection_cycle())
            except Exception:
                exit_code = 1

            sys.exit(exit_code)
        else:
            asyncio.run(app.run_scheduler())

    except Exception as e:
        logging.error(f"Application startup failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
