#!/usr/bin/env python3
"""端口状态监控脚本。Port status monitoring script.

周期性检查全部候选端口，并在某个 Opiumware 实例上线或下线时输出一行提示；
保持为独立脚本，便于在菜单之外常驻运行。
"""

import sys
import time
from pathlib import Path

# 添加项目根目录到路径
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from potassium.config.env_profiles import CHECK_PROFILE
from potassium.port_config import load_profile
from potassium.tools.port_probe import scan_ports


def describe_changes(previous: dict[int, bool], current: dict[int, bool]) -> list[str]:
    """返回状态变化的描述。Describe ports whose reachability changed."""
    lines = []
    for port, reachable in current.items():
        if previous.get(port) == reachable:
            continue
        lines.append(f"{'✅' if reachable else '❌'} {port} {'上线' if reachable else '下线'}")
    return lines


def main():
    """主函数。Main function."""
    import argparse

    parser = argparse.ArgumentParser(description="端口状态监控")
    parser.add_argument(
        "--interval",
        type=float,
        default=2.0,
        help="检查间隔（秒，默认 2）",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="只检查一次",
    )

    args = parser.parse_args()
    profile = load_profile(CHECK_PROFILE)

    print(f"🔍 监控端口 {profile.ports[0]}-{profile.ports[-1]} ...")
    previous: dict[int, bool] = {}
    try:
        while True:
            current = scan_ports(profile=profile)
            for line in describe_changes(previous, current):
                print(line)
            previous = current
            if args.once:
                break
            time.sleep(args.interval)
    except KeyboardInterrupt:
        print("\n已停止")
    return 0


if __name__ == "__main__":
    sys.exit(main())
