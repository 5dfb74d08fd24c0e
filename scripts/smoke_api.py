import requests
import json
import time
import subprocess
import sys
import os


def smoke_test(base_url: str = "http://localhost:8000"):
    # Wait for API to be ready
    print("Waiting for API to be ready...")
    for _ in range(30):
        try:
            resp = requests.get(f"{base_url}/health")
            if resp.status_code == 200:
                print("API is ready.")
                break
        except requests.ConnectionError:
            time.sleep(2)
    else:
        print("API failed to start.")
        return

    resp = requests.post(f"{base_url}/sessions")
    resp.raise_for_status()
    session_id = resp.json()["sessionId"]
    session_url = f"{base_url}/sessions/{session_id}"
    print(f"Session: {session_id}")

    requests.post(f"{session_url}/preferences/genres", json={"value": "Sci-Fi"})
    requests.post(f"{session_url}/preferences/favoriteMovies", json={"value": "Inception"})
    requests.patch(f"{session_url}/preferences", json={"mood": "Thoughtful"})

    print("\nSubmitting preferences...")
    resp = requests.post(f"{session_url}/submit")
    if resp.status_code == 200:
        print("Response:")
        print(json.dumps(resp.json(), indent=2))
    else:
        print(f"Error: {resp.status_code} - {resp.text}")

    resp = requests.post(f"{session_url}/restart")
    print(f"\nAfter restart: step={resp.json()['step']}")
    requests.delete(session_url)


if __name__ == "__main__":
    # Start API in background
    print("Starting API...")
    proc = subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "cinematch.api.main:app", "--host", "0.0.0.0", "--port", "8000"],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env={**os.environ, "PYTHONPATH": "."}
    )

    try:
        smoke_test()
    finally:
        print("Stopping API...")
        proc.terminate()
        proc.wait()
