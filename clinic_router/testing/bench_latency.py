"""bench_latency.py

Simple warm + latency measurement script for the clinic tool router.
Run this after starting the server (clinic-router, or uvicorn clinic_router.main:app --port 3000).
"""

import requests
import time
import statistics

BASE = "http://127.0.0.1:3000"


def warm():
    print("Warming endpoints...")
    try:
        r = requests.get(f"{BASE}/")
        print("/:", r.status_code)
        r = requests.get(f"{BASE}/tools")
        print("/tools:", r.status_code)
    except Exception as e:
        print("Warm failed:", e)


def measure_tool(name, arguments, n=5):
    payload = {"name": name, "arguments": arguments}
    latencies = []

    for i in range(n):
        start = time.time()
        try:
            r = requests.post(f"{BASE}/tools", json=payload, timeout=10)
            elapsed = (time.time() - start) * 1000
            latencies.append(elapsed)
            print(f"{name} run {i+1}: {elapsed:.2f} ms, status: {r.status_code}")
        except Exception as e:
            print(f"{name} run {i+1} failed:", e)

    if latencies:
        print(f"\n{name} results (ms):")
        print("p50:", statistics.median(latencies))
        print("min:", min(latencies))
        print("max:", max(latencies))
        print("mean:", statistics.mean(latencies))


if __name__ == '__main__':
    warm()
    time.sleep(0.5)
    measure_tool("appt.search", {"mode": "telehealth"})
    measure_tool("insurance.verify", {"carrier": "Aetna", "memberId": "123456"})

    slots = requests.get(f"{BASE}/tools/slots", timeout=10).json()["slots"]
    if slots:
        measure_tool("appt.book", {"patientId": "bench", "slotId": slots[-1]["id"], "reason": "bench", "contact": "555-0100"})
        measure_tool("refill.create", {"medication": "bench", "patientId": "bench"})
