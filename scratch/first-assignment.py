from duallink import cli

# Network topology
#
#   10.1.1.0 Network           10.1.2.0 Network
#   n0 (client A)              n2 (client B)
#    | point-to-point           | point-to-point
#    | 5Mbps, 2ms               | 5Mbps, 2ms
#   n1 (server A)              n3 (server B)
#
# ./first-assignment.py --useTcp=false --verbose=true

if __name__ == '__main__':
    import sys
    sys.exit(cli.main(sys.argv))
