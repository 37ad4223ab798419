# -- TouchFluid CLI Entry -- #

'''
Allows `python -m TouchFluid`.

Sean Bowman [02/10/2026]
'''

from TouchFluid.runner import main

main()
