"""
Weather refresh scheduler service.
Runs the aviation refresh every 15 minutes and the waypoint refresh every
30 minutes, each on its own asyncio task.
"""
import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional

from weather_feeds.utils.helpers import utc_now_iso
from weather_feeds.utils.logger import get_logger


class WeatherScheduler:
    """
    Scheduler service for refreshing cached weather periodically.
    """

    def __init__(
        self,
        service_provider: Callable[[], Any],
        aviation_interval_seconds: int = 900,  # 15 minutes
        waypoint_interval_seconds: int = 1800,  # 30 minutes
        logger=None
    ):
        """
        Initialize weather scheduler.

        Args:
            service_provider: Returns the WeatherRefreshService to run; may raise
                ConfigurationError, in which case the tick is skipped
            aviation_interval_seconds: Interval between aviation refreshes
            waypoint_interval_seconds: Interval between waypoint refreshes
            logger: Logger instance
        """
        self.service_provider = service_provider
        self.intervals = {
            "aviation": aviation_interval_seconds,
            "waypoints": waypoint_interval_seconds,
        }
        self.logger = logger or get_logger()
        self.running = False
        self.tasks: Dict[str, asyncio.Task] = {}
        self.last_runs: Dict[str, Dict[str, Any]] = {}

    async def run_job(self, job: str) -> Optional[Dict[str, Any]]:
        """
        Run one job immediately and record its outcome.

        Args:
            job: 'aviation' or 'waypoints'

        Returns:
            Run summary, or None if the job could not be configured
        """
        started_at = utc_now_iso()
        try:
            service = self.service_provider()
        except Exception as e:
            self.logger.error(f"✗ Skipping {job} refresh: {e}")
            self.last_runs[job] = {"started_at": started_at, "error": str(e)}
            return None

        runner: Callable[[], Awaitable[Any]] = (
            service.refresh_aviation if job == "aviation" else service.refresh_waypoints
        )
        result = await runner()

        summary = {
            "started_at": started_at,
            "finished_at": utc_now_iso(),
            "succeeded": result.succeeded,
            "failed": result.failed,
        }
        self.last_runs[job] = summary
        return summary

    async def _scheduler_loop(self, job: str):
        """
        Main scheduler loop for one job that runs continuously.
        """
        interval = self.intervals[job]
        self.logger.info(f"🌤️  {job.capitalize()} refresh started (interval: {interval}s)")

        while self.running:
            try:
                await self.run_job(job)

                # Wait for next interval
                await asyncio.sleep(interval)

            except asyncio.CancelledError:
                self.logger.info(f"🛑 {job.capitalize()} refresh cancelled")
                break
            except Exception as e:
                self.logger.exception(f"✗ {job.capitalize()} scheduler loop error: {e}")
                # Continue running despite errors
                await asyncio.sleep(interval)

    async def start(self):
        """
        Start both refresh loops.
        """
        if self.running:
            self.logger.warning("Weather scheduler is already running")
            return

        self.running = True
        for job in self.intervals:
            self.tasks[job] = asyncio.create_task(self._scheduler_loop(job))

    async def stop(self):
        """
        Stop both refresh loops.
        """
        if not self.running:
            self.logger.warning("Weather scheduler is not running")
            return

        self.running = False
        for task in self.tasks.values():
            task.cancel()
        for task in self.tasks.values():
            try:
                await task
            except asyncio.CancelledError:
                pass
        self.tasks = {}
        self.logger.info("🛑 Weather scheduler stopped")

    def get_status(self) -> Dict[str, Any]:
        """Running flag, intervals and the last run of each job."""
        return {
            "running": self.running,
            "intervals_seconds": dict(self.intervals),
            "last_runs": {job: dict(run) for job, run in self.last_runs.items()},
        }
