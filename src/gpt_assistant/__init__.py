"""Send selected code to a GPT model and apply or show the reply."""
