"""Terminal chat session talking to the empathic-chatbot relay."""
