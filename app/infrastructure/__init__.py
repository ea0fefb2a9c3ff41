"""Infrastructure modules for the counters bot.

Centralized infrastructure components:
- configuration: Settings management (settings, Settings)
- logging: Structured logging (get_module_logger, bind_invocation_context)
- operations: Operation results and error classification
- platforms: Chat entity models, reference resolution, follow-up prompts,
  argument parsing and signature matching
- persistence: Counter value stores
- commands: Command framework (registry, context, router)
"""
