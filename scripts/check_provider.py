# check_provider.py
# Sends one small file through the configured LLM provider and prints the analysis.
#
#   python scripts/check_provider.py [path/to/file.py]
import asyncio
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

SAMPLE_CODE = "def add(a, b):\n    return a + b\n"


def main(argv=None):
    load_dotenv()

    from app.analysis.language import classify_language
    from app.config import Settings
    from app.llm.fallback import fallback_result
    from app.llm.model import get_analysis_client

    argv = sys.argv[1:] if argv is None else argv
    if argv:
        path = Path(argv[0])
        filename, code = path.name, path.read_text(encoding="utf-8", errors="replace")
    else:
        filename, code = "sample.py", SAMPLE_CODE

    settings = Settings()
    print("PROVIDER:", settings.LLM_PROVIDER)
    print("MODEL:", settings.LLM_MODEL)
    if not settings.provider_api_key:
        print("API key for this provider is not set; expect the fallback result.")

    client = get_analysis_client(settings)
    result = asyncio.run(client.analyze(code, filename, classify_language(filename)))
    print(json.dumps(result.to_wire(), indent=2))

    if result == fallback_result():
        print("Provider call failed, fallback result returned.")
        return 1
    print("Provider is working!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
