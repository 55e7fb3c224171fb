def share_text(score, url=None):
    """Formats the result string handed to the share publisher on game over."""
    text = f"I scored {score} in 2048!"
    if url:
        text = f"{text} {url}"
    return text
