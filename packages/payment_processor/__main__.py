from .cli import app

app(prog_name="payment-processor")
