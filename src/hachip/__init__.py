"""
hachip: CHIP-8仮想マシンのエミュレータ。
"""
__version__ = "0.1.0"
