"""Platform layer: chat entities and everything that interprets user input.

- models: Channel, User, UnknownUser, Guild, Message
- client: ChatClient collaborator protocol
- resolution: Fuzzy channel/user reference resolution
- prompts: Follow-up questions with scoped, time-bounded replies
- parsing: Tokenizer and multi-signature argument matching
"""
