"""
Smoke test against a running server.

    python -m docextract

Then in another terminal:
    python test.py https://example.com/some/document.pdf
"""

import sys

import httpx

BASE = "http://127.0.0.1:3000"

url = sys.argv[1] if len(sys.argv) > 1 else "https://www.w3.org/WAI/ER/tests/xhtml/testfiles/resources/pdf/dummy.pdf"

response = httpx.get(f"{BASE}/extract", params={"url": url}, timeout=60)

print(f"status:  {response.status_code}")
print(f"type:    {response.headers.get('content-type')}")

if response.status_code == 200:
    text = response.text
    print(f"lines:   {text.count(chr(10))}")
    print(f"chars:   {len(text):,}")
    print("\n--- text ---\n")
    print(text[:2000])
else:
    print(response.text)
