"""Configuration templates for opencoder."""

CONFIG_TEMPLATE = """\
{
  "ollama_url": "http://localhost:11434",
  "model": "qwen2.5-coder:latest",
  "ignore_dirs": [".git", ".open-coder", "node_modules", "__pycache__", ".venv"],
  "context_file_limit": 50,
  "request_timeout": 0,
  "command_timeout": 0,
  "record_command_output": false,
  "enable_debug": false,
  "prompts": {
    "default": "You are a coding assistant working inside the repository described in the system message. Answer ONLY with a JSON object of the form {\\"commands\\": [\\"<bash command>\\", ...], \\"explanation\\": \\"<what the commands do>\\"}. If no command is needed, answer with {\\"commands\\": [], \\"answer\\": \\"<your answer>\\"}. Commands run in order with bash from the working directory.\\n\\nRequest: {{input}}"
  }
}
"""
