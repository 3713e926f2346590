import asyncio
import os
import sys

# Ensure src is in pythonpath
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from dotenv import load_dotenv
load_dotenv()

from trait_dials.config import get_settings
from trait_dials.sources.extractor import DocumentExtractor, Extracted
from trait_dials.sources.normalizer import normalize_source_url

PREVIEW_CHARS = 500


async def main(url: str):
    direct_url = normalize_source_url(url)
    print(f"Input URL:      {url}")
    print(f"Normalized URL: {direct_url}")

    extractor = DocumentExtractor(get_settings())
    print("Fetching and extracting...")
    result = await extractor.fetch_text(direct_url)

    if not isinstance(result, Extracted):
        print(f"Unavailable: {result.reason}")
        return 1

    print(f"Extracted {len(result.text)} characters.")
    if result.text:
        print("-" * 40)
        print(result.text[:PREVIEW_CHARS])
    return 0

if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python scripts/extract_document.py <document-url>")
        sys.exit(2)
    sys.exit(asyncio.run(main(sys.argv[1])))
