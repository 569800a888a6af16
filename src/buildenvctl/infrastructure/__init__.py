"""Infrastructure layer — config sources, toolchain lookup, keytool, env files.

This layer depends on stdlib and third-party libs (python-dotenv).
It may import domain models but never services, commands, or output.
The service layer bridges between domain rules and infrastructure.
"""
