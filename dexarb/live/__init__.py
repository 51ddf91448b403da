"""Live polling loop: gas pricing, evaluation, execution and confirmation."""
