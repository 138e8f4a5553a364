from apscheduler.schedulers.asyncio import AsyncIOScheduler

from partflow.core.config import LOW_STOCK_REPORT_HOUR
from partflow.core.db import AsyncSessionLocal
from partflow.services.inventory.part_service import low_stock_report

scheduler = AsyncIOScheduler()


@scheduler.scheduled_job("cron", hour=LOW_STOCK_REPORT_HOUR, minute=0, id="low_stock_report")
async def low_stock_report_job():
    async with AsyncSessionLocal() as db:
        await low_stock_report(db)
