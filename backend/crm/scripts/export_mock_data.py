# export_mock_data.py
# 把一份 mock 数据导出成 JSON，方便前端联调或检查生成结果
#
# 用法: python -m crm.scripts.export_mock_data [输出文件] [--seed N] [--count N]

import argparse
import json
import os
import sys

from dotenv import load_dotenv

CURRENT = os.path.abspath(__file__)
BACKEND_DIR = os.path.abspath(os.path.join(CURRENT, "../../.."))
sys.path.append(BACKEND_DIR)

load_dotenv(os.path.join(BACKEND_DIR, ".env"))

from crm.config import settings
from crm.services.mock_data import generate_dataset


def export(output_file: str, seed=None, count: int = 75):
    dataset = generate_dataset(seed=seed, student_count=count)

    payload = {
        "students": [s.model_dump(mode="json") for s in dataset.students],
        "communications": [c.model_dump(mode="json") for c in dataset.communications],
        "notes": [n.model_dump(mode="json") for n in dataset.notes],
        "activities": [a.model_dump(mode="json") for a in dataset.activities],
    }

    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)

    print(f"✔ 已导出到 {output_file}")
    for name, items in payload.items():
        print(f"  {name}: {len(items)}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="导出 mock CRM 数据")
    parser.add_argument("output", nargs="?", default="mock_data.json")
    parser.add_argument("--seed", type=int, default=settings.MOCK_SEED)
    parser.add_argument("--count", type=int, default=settings.MOCK_STUDENT_COUNT)
    args = parser.parse_args(argv)

    export(args.output, seed=args.seed, count=args.count)


if __name__ == "__main__":
    main()
