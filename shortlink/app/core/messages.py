# User-facing fallback texts, shown when a failure carries no backend message.
CREATE_FAILED = "创建短链接失败"
LOAD_FAILED = "加载链接失败"
DELETE_FAILED = "删除失败"
SUBMISSION_IN_PROGRESS = "正在生成中，请稍候"

LONG_URL_REQUIRED = "请输入原始链接"
LONG_URL_INVALID = "请输入有效的链接，如：https://example.com"
