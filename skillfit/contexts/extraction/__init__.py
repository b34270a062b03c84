"""
Extraction Context

Responsibilities:
- Normalizes raw job-posting text (unicode, bullets, markdown emphasis)
- Pulls candidate skill/tool phrases out of text with independent strategies
- Fractures compound phrases into atomic skill strings
- Labels phrases required/desired from section headers and local language
- Flags special application requirements (video, travel, clearance, ...)

Owns: Phrase extraction, splitting, requirement detection
Never: Decides whether a phrase is a skill or a tool, or scores a profile
"""
