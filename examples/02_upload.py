"""
Submit a batch upload and send the bytes to each grant
"""
import asyncio
import os

import aiohttp

from drivepy import DriveClient, PlacementOptions, UploadSource


async def main():
    sources = [
        UploadSource.from_path("photos/a/1.jpg"),
        UploadSource.from_path("photos/b/2.jpg"),
    ]
    options = PlacementOptions(
        path="/uploads",
        relative_paths=["a/1.jpg", "b/2.jpg"],
        preserve_structure=True,
    )

    async with DriveClient(api_key=os.environ["DRIVE_API_KEY"]) as client:
        items = client.items(os.environ["DRIVE_ID"])
        result = await items.upload_many(sources, options)
        print(f"Job: {result.job_ids}")

        # Bytes go straight to storage, one PUT per grant
        async with aiohttp.ClientSession() as http:
            for source, grant in zip(sources, result.files):
                with open(source.content, "rb") as f:
                    data = f.read()
                async with http.put(grant.target.url, data=data) as response:
                    if response.status >= 300:
                        await items.mark_upload_failed(
                            grant.file_id, error=f"HTTP {response.status}"
                        )
                print(f"{grant.path}: HTTP {response.status}")


if __name__ == "__main__":
    asyncio.run(main())
