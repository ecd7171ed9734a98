from .numeric import utils, ops, gmpmath
from .arithmetic import evalctx, interval, modular, modint, polycoef

DyadicFractionInterval = interval.DyadicFractionInterval
DyadicCtx = evalctx.DyadicCtx
ModularInteger = modint.ModularInteger
Modulus = modular.Modulus
StaticModulus = modular.StaticModulus
PrimePowerModulus = modular.PrimePowerModulus
PrimeModulus = modular.PrimeModulus
BaseAndExponent = modular.BaseAndExponent
DivisorIsOne = polycoef.DivisorIsOne
