from error_propagation import Propagator
from uncertainties import ufloat

# Correlation "both" reports the linear and the quadrature sum side by side
prop = Propagator(correlation="both")

# Print every partial derivative as it is computed
prop.on(
    "differential",
    lambda d: print(f"d/d{d.variable_name}: {d.expression} = {d.value:.4g}"),
)

# Variables can be plain mappings or numbers from the uncertainties package
result = prop.calculate(
    "I_0 * cos(theta + theta_0) + I_background",
    {
        "I_0": {"value": 2.0, "error": 0.1},
        "theta": {"value": 0.3, "error": 0.02},
        "theta_0": ufloat(0, 0.01),
        "I_background": {"value": 0.1, "error": 0.05},
    },
)
print(result.value, result.error)

# A series of measurements for theta, the other variables held constant
results = Propagator().calculate_series(
    "I_0 * cos(theta)",
    {
        "I_0": {"value": 2.0, "error": 0.1},
        "theta": [{"value": t, "error": 0.02} for t in (0.0, 0.5, 1.0, 1.5)],
    },
)
y = [r.value for r in results]
y_err = [r.error for r in results]
