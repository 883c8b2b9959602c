"""
Poll an upload job until it settles
"""
import asyncio
import os
import sys

from drivepy import DriveClient


async def main(job_id: str):
    async with DriveClient(api_key=os.environ["DRIVE_API_KEY"]) as client:
        items = client.items(os.environ["DRIVE_ID"])

        # Cadence is up to the caller
        while True:
            job = await items.get_upload_status(job_id)
            print(f"{job.status.value}: {job.progress.processed}/{job.progress.total}")
            if job.is_terminal:
                break
            await asyncio.sleep(2)

        # Partial failure is data, not an exception
        if job.has_errors:
            for file_id in job.failed_file_ids:
                print(f"  {file_id}: {job.error_summary[file_id]}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1]))
