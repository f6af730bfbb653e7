"""Project-wide default values for Potassium.

These constants describe how the companion Opiumware process is reached on
the local machine. Keeping them centralized makes it easier to audit and
adjust defaults without touching the delivery code.
"""

# Opiumware listens on one of these loopback ports; the order is the scan order.
CANDIDATE_PORTS = (8392, 8393, 8394, 8395, 8396, 8397)

DEFAULT_HOST = "127.0.0.1"

# Text sentinels used by the front end.
ALL_PORTS_SELECTOR = "ALL"
PROBE_PAYLOAD = "NULL"

DEFAULT_CONNECT_TIMEOUT_MS = 400
DEFAULT_CHECK_TIMEOUT_MS = 400

# 脚本文件相关默认配置
SCRIPT_SUFFIXES = (".lua", ".txt")
