# run_local_test.py
import argparse
import json
from agent_core.dispatcher import handle_query

def main():
    parser = argparse.ArgumentParser(description="Ask PeepInMe where to buy something.")
    parser.add_argument("query", type=str, help="Text query to test")
    args = parser.parse_args()

    response = handle_query(text=args.query)
    print("\n🛍️ PeepInMe Response:\n", json.dumps(response, indent=2, ensure_ascii=False))

if __name__ == "__main__":
    main()
