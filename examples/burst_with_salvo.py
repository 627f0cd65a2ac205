"""
Quick sanity test: a pooled burst of form POSTs against one endpoint.
Run: uv run examples/burst_with_salvo.py
"""
import asyncio
import os

from salvo import HttpPostAction, Sampler, StdoutListener, ThreadGroup

HOST = os.getenv("SALVO_HOST", "https://httpbin.org")

async def main():
    action = HttpPostAction(
        HOST,
        "/post",
        data="name=salvo",
        timeout_s=float(os.getenv("HTTP_REQUEST_TIMEOUT_S", "10")),
    )
    await action.open()
    try:
        group = ThreadGroup(
            Sampler("httpbin-post", action),
            freq=20,
            num_of_threads=4,
            use_progress_bar=True,
        )
        summary = await group.start(StdoutListener())
    finally:
        await action.close()
    print("\nSummary:", summary)

if __name__ == "__main__":
    asyncio.run(main())
