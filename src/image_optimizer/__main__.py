from image_optimizer.ui.cli import app

if __name__ == "__main__":
    app(prog_name="image-optimizer")
