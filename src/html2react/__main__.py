from html2react.cli import app

if __name__ == "__main__":
    app(prog_name="html2react")
