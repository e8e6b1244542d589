from django.db import models        # ORM base classes to define database tables as Python classes

# ---------- Currency ----------
class Currency(models.Model): # Store a list of valid currencies
    """
    ISO currencies. Documents store the code; amounts are always integers
    in the currency's minor unit (øre, cents).
    """
    # Set code as the primary key, so it uniquely identifies a currency
    code = models.CharField(max_length=3, primary_key=True)  # 'DKK', 'EUR'
    name = models.CharField(max_length=64)  # 'Danish Krone'
    # Nullable display symbol ("kr", "€")
    symbol = models.CharField(max_length=8, blank=True, null=True)
    # Number of minor units per major unit, as a power of ten (DKK: 2 → 100 øre)
    decimal_places = models.PositiveSmallIntegerField(default=2)

    def __str__(self):
        return f"{self.code} ({self.symbol or ''})"

    class Meta:
        # Make admin display plural as “currencies” instead of default “currencys”
        verbose_name_plural = "currencies"

    def format_minor(self, amount):
        """Render an integer minor-unit amount, e.g. 25000 → '250.00 DKK'."""
        places = self.decimal_places
        major = amount / (10 ** places) if places else amount
        return f"{major:.{places}f} {self.code}"
