icon = {
    "running": "▶️",
    "success": "✅",
    "failed": "❌",
    "warning": "⚠️",
    "search": "🔍",
    "create": "📝",
    "save": "💾",
    "login": "🔑",
    "logout": "🚪",
    "scenario": "📋",
}
